#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Stream lifecycle commands.

Each command maps to exactly one remote stream operation and returns the
text to show. The commands need a server connection; without one,
execute() returns an Unavailable signal instead of running them.
"""

from dataclasses import dataclass, field
from typing import Union

import deployment_properties


LIST_STREAM = 'stream list'
CREATE_STREAM = 'stream create'
DEPLOY_STREAM = 'stream deploy'
UNDEPLOY_STREAM = 'stream undeploy'
UNDEPLOY_STREAM_ALL = 'stream all undeploy'
DESTROY_STREAM = 'stream destroy'
DESTROY_STREAM_ALL = 'stream all destroy'


@dataclass
class Table:
    """
    Rows of text rendered as aligned columns.
    """
    headers: list
    rows: list = field(default_factory=list)

    def add_row(self, *values) -> None:
        self.rows.append(['' if value is None else str(value) for value in values])

    def render(self) -> str:
        widths = [len(header) for header in self.headers]
        for row in self.rows:
            widths = [max(width, len(value)) for width, value in zip(widths, row)]
        separator = '  '
        lines = [separator.join(header.ljust(width) for header, width in zip(self.headers, widths)).rstrip(),
                 separator.join('-' * width for width in widths)]
        for row in self.rows:
            lines.append(separator.join(value.ljust(width) for value, width in zip(row, widths)).rstrip())
        return '\n'.join(lines)

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class Unavailable:
    """
    Returned instead of a result when a command cannot run
    because there is no server connection.
    """
    command: str

    def __str__(self) -> str:
        return f'''Command '{self.command}' is unavailable: not connected to a Data Flow server (use 'server connect URI').'''


class StreamCommands:
    """
    Stream commands working on the connection held by `shell`.
    """

    def __init__(self, shell, user_input, properties_encoding: str = deployment_properties.DEFAULT_ENCODING):
        self.shell = shell
        self.user_input = user_input
        self.properties_encoding = properties_encoding
        self.commands = {
            LIST_STREAM: self.list_streams,
            CREATE_STREAM: self.create_stream,
            DEPLOY_STREAM: self.deploy_stream,
            UNDEPLOY_STREAM: self.undeploy_stream,
            UNDEPLOY_STREAM_ALL: self.undeploy_all_streams,
            DESTROY_STREAM: self.destroy_stream,
            DESTROY_STREAM_ALL: self.destroy_all_streams,
        }

    def available(self) -> bool:
        return self.shell.operations is not None

    def execute(self, command: str, **kwargs) -> Union[str, Table, Unavailable]:
        """
        Runs the named command if a connection exists.
        Raises KeyError for unknown command names.
        """
        method = self.commands[command]
        if not self.available():
            return Unavailable(command)
        return method(**kwargs)

    def stream_operations(self):
        return self.shell.operations.stream_operations()

    def _confirmed(self, force: bool, question: str) -> bool:
        return force or self.user_input.prompt_with_options(question, 'n', 'y', 'n').lower() == 'y'

    def list_streams(self) -> Table:
        """List created streams."""
        table = Table(['Stream Name', 'Stream Definition', 'Status'])
        for stream in self.stream_operations().list():
            table.add_row(stream.name, stream.dsl_text, stream.status)
        return table

    def create_stream(self, name: str, dsl: str, deploy: bool = False) -> str:
        """Create a new stream definition."""
        self.stream_operations().create_stream(name, dsl, deploy)
        return f"Created and deployed new stream '{name}'" if deploy else f"Created new stream '{name}'"

    def deploy_stream(self, name: str, properties: str = None, properties_file=None) -> str:
        """
        Deploy a previously created stream. The deployment properties are
        resolved completely before the server is contacted.
        """
        properties_to_use = deployment_properties.resolve(properties, properties_file, self.properties_encoding)
        self.stream_operations().deploy(name, properties_to_use)
        return f"Deployed stream '{name}'"

    def undeploy_stream(self, name: str) -> str:
        """Un-deploy a previously deployed stream."""
        self.stream_operations().undeploy(name)
        return f"Un-deployed stream '{name}'"

    def undeploy_all_streams(self, force: bool = False) -> str:
        """Un-deploy all previously deployed streams."""
        if not self._confirmed(force, 'Really undeploy all streams?'):
            return ''
        self.stream_operations().undeploy_all()
        return 'Un-deployed all the streams'

    def destroy_stream(self, name: str) -> str:
        """Destroy an existing stream."""
        self.stream_operations().destroy(name)
        return f"Destroyed stream '{name}'"

    def destroy_all_streams(self, force: bool = False) -> str:
        """Destroy all existing streams."""
        if not self._confirmed(force, 'Really destroy all streams?'):
            return ''
        self.stream_operations().destroy_all()
        return 'Destroyed all streams'
