"""
Shared fixtures for the shell tests.
"""

from unittest.mock import Mock

import pytest

from console import CLI
from stream_commands import StreamCommands


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    """Run every test without ANSI colors and restore the setting afterwards."""
    monkeypatch.setattr(CLI, 'color', False)


@pytest.fixture
def shell():
    """A connected shell; the stream operations are a Mock."""
    shell = Mock()
    shell.target_uri = 'http://localhost:9393'
    return shell


@pytest.fixture
def stream_operations(shell):
    return shell.operations.stream_operations.return_value


@pytest.fixture
def user_input():
    user_input = Mock()
    user_input.prompt_with_options.return_value = 'n'
    return user_input


@pytest.fixture
def commands(shell, user_input):
    return StreamCommands(shell, user_input)


@pytest.fixture
def properties_file(tmp_path):
    path = tmp_path / 'deployment.properties'
    path.write_text('# comment\nfoo=bar\n')
    return path
