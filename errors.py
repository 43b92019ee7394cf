#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Exceptions raised by the Data Flow shell.

Everything derives from DataFlowShellError, so the front-end can report
any shell failure with a single except clause and map it to an exit code.
"""


class DataFlowShellError(Exception):
    """
    Base class of all shell errors.
    """
    exitcode = 2


class ConfigurationError(DataFlowShellError):
    """
    The shell configuration file could not be read or is invalid.
    """


class ConflictingOptionsError(DataFlowShellError):
    """
    More than one of a set of mutually exclusive options has been given.
    """

    def __init__(self, *options: str):
        self.options = options
        names = ' and '.join(f"'{option}'" for option in options)
        super().__init__(f'You cannot specify both {names}.')


class MalformedPropertiesError(DataFlowShellError):
    """
    An inline deployment property string does not follow `key=value[,key=value...]`.
    """


class FileReadError(DataFlowShellError):
    """
    A deployment properties file is missing, unreadable or malformed.
    The underlying exception is chained as __cause__.
    """

    def __init__(self, path, reason):
        self.path = path
        super().__init__(f'Error reading properties file "{path}": {reason}')


class RemoteOperationError(DataFlowShellError):
    """
    The Data Flow server could not be reached or rejected the request.
    """
    exitcode = 3

    def __init__(self, message: str, status: int = None):
        self.status = status
        super().__init__(f'{status}: {message}' if status else message)


class UsageError(DataFlowShellError):
    """
    The command line names no known command.
    """
    exitcode = 1
