#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Operator shell for the streams of a Data Flow server.

Runs a single command given on the command line, or an interactive shell
if no command is given. Streams are pipeline definitions written in the
stream DSL, e.g. "http --port=9000 | hdfs".

Exitcodes:

    0   Everything went fine (also if a confirmation has been declined).
    1   Issues with the command line parameters.
    2   Issues with the configuration or the deployment properties,
        or user interruption.
    3   The Data Flow server could not be reached or rejected the request.
    4   The command is unavailable, because there is no server connection.

Changelog:
----------
19.10.2026      v0.1        - Stream commands (list, create, deploy, undeploy, destroy).
                            - Deployment properties inline or as properties file.
                            - Interactive shell with `server connect`.
"""

import shlex
import sys
from typing import Tuple

import docopt

import shell_config
from console import CLI
from dataflow_client import DataFlowShell
from errors import DataFlowShellError, RemoteOperationError, UsageError
from stream_commands import (CREATE_STREAM, DEPLOY_STREAM, DESTROY_STREAM, DESTROY_STREAM_ALL, LIST_STREAM,
                             UNDEPLOY_STREAM, UNDEPLOY_STREAM_ALL, StreamCommands, Unavailable)
from user_input import UserInput


VERSION = 'v0.1'

EXIT_UNAVAILABLE = 4

MAIN_DOC = """
Usage:
    dfsh [options] [<command> [<args>...]]
    dfsh -h | --help
    dfsh --version

Commands:
    stream ...          Create, list, deploy, undeploy and destroy streams.
    server ...          Connect to a Data Flow server or show the connection.

    Without a command an interactive shell is started.

Options:
    -h --help           Show this help.
    --version           Show the version.
    --uri=URI           URI of the Data Flow server (overrides the configuration).
    --config=FILE       Configuration file (default: ~/.dfsh.yaml).
    --no-color          Do not colorize the output.
"""

STREAM_DOC = """
Usage:
    stream list
    stream create <name> --definition=<dsl> [--deploy]
    stream deploy <name> [--properties=<properties>] [--propertiesFile=<file>]
    stream undeploy <name>
    stream all undeploy [--force]
    stream destroy <name>
    stream all destroy [--force]

Options:
    --definition=<dsl>          A stream definition, using the DSL (e.g. "http --port=9000 | hdfs").
    --deploy                    Deploy the stream immediately.
    --properties=<properties>   The properties for this deployment (key=value,key=value).
    --propertiesFile=<file>     The properties for this deployment (as a .properties file).
    --force                     Bypass the confirmation prompt.
"""

SERVER_DOC = """
Usage:
    server connect <uri>
    server info
"""


def stream_invocation(arguments: dict) -> Tuple[str, dict]:
    """
    Maps the parsed arguments of a stream command to the name of the
    command and its keyword arguments.
    """
    name = arguments['<name>']
    if arguments['all']:
        command = UNDEPLOY_STREAM_ALL if arguments['undeploy'] else DESTROY_STREAM_ALL
        return command, {'force': arguments['--force']}
    if arguments['list']:
        return LIST_STREAM, {}
    if arguments['create']:
        return CREATE_STREAM, {'name': name, 'dsl': arguments['--definition'], 'deploy': arguments['--deploy']}
    if arguments['deploy']:
        return DEPLOY_STREAM, {'name': name,
                               'properties': arguments['--properties'],
                               'properties_file': arguments['--propertiesFile']}
    if arguments['undeploy']:
        return UNDEPLOY_STREAM, {'name': name}
    return DESTROY_STREAM, {'name': name}


def server_command(arguments: dict, shell: DataFlowShell) -> str:
    if arguments['connect']:
        uri = arguments['<uri>']
        shell.connect(uri)
        return f'Successfully targeted {uri}'
    state = 'connected' if shell.operations is not None else 'not connected'
    return f'''Data Flow server: {shell.target_uri or '(none)'} ({state})'''


def run_command(argv: list, shell: DataFlowShell, commands: StreamCommands):
    """
    Parses and executes a single command line, already split into words.
    Usage errors raise docopt.DocoptExit.
    """
    command, args = argv[0], argv[1:]
    if command == 'stream':
        name, kwargs = stream_invocation(docopt.docopt(STREAM_DOC, argv=args))
        return commands.execute(name, **kwargs)
    if command == 'server':
        return server_command(docopt.docopt(SERVER_DOC, argv=args), shell)
    raise UsageError(f'Unknown command "{command}". Known commands are "stream" and "server".')


def show(result) -> int:
    """
    Prints the result of a command and returns the exit code.
    """
    if isinstance(result, Unavailable):
        CLI.fail(str(result))
        return EXIT_UNAVAILABLE
    if result:
        CLI.print(str(result))
    return 0


def repl(shell: DataFlowShell, commands: StreamCommands, read=input) -> None:
    """
    Reads and executes commands until `exit`, `quit` or end of input.
    Errors are reported and the shell continues.
    """
    CLI.print_info(f'dfsh {VERSION} - "help" lists the commands, "exit" leaves the shell.')
    while True:
        try:
            line = read('dfsh> ')
        except EOFError:
            CLI.print()
            break
        except KeyboardInterrupt:
            CLI.print()
            continue

        try:
            argv = shlex.split(line)
        except ValueError as err:
            CLI.fail(f'Cannot parse command line: {err}')
            continue
        if not argv:
            continue
        if argv[0] in ('exit', 'quit'):
            break
        if argv[0] == 'help':
            CLI.print(STREAM_DOC.strip())
            CLI.print(SERVER_DOC.rstrip())
            continue

        try:
            show(run_command(argv, shell, commands))
        except SystemExit as usage:
            # docopt exits with the usage text as code on bad input,
            # and without a code after it has printed the help for --help.
            if isinstance(usage.code, str):
                CLI.print(usage.code)
        except DataFlowShellError as err:
            CLI.fail(str(err))
        except KeyboardInterrupt:
            CLI.print()


def main(argv: list = None) -> None:

    # Parsing arguments.
    args = docopt.docopt(MAIN_DOC, argv=argv, version=VERSION, options_first=True)
    if args['--no-color']:
        CLI.color = False

    # Load the configuration.
    try:
        config = shell_config.load_config(args['--config'])
    except DataFlowShellError as err:
        CLI.exit_on_error(str(err), err.exitcode)
    if not config['color']:
        CLI.color = False

    shell = DataFlowShell(timeout=config['server']['timeout'], page_size=config['server']['page_size'])
    commands = StreamCommands(shell, UserInput(), config['properties_encoding'])

    # Without a connection the commands are unavailable, so a failure is no reason to stop.
    uri = args['--uri'] or config['server']['uri']
    try:
        shell.connect(uri)
    except RemoteOperationError as err:
        CLI.warn(f'Unable to contact Data Flow server: {err}')

    # Interactive shell.
    if not args['<command>']:
        repl(shell, commands)
        sys.exit(0)

    # Single command.
    try:
        exitcode = show(run_command([args['<command>']] + args['<args>'], shell, commands))
    except DataFlowShellError as err:
        CLI.exit_on_error(str(err), err.exitcode)
    except KeyboardInterrupt:
        CLI.exit_on_error('\nUser interruption. Terminating.', 2)
    sys.exit(exitcode)


if __name__ == '__main__':
    main()
