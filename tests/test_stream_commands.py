"""
Tests for the stream lifecycle commands.
"""

import pytest

from dataflow_client import StreamDefinitionResource
from errors import ConflictingOptionsError, FileReadError, MalformedPropertiesError, RemoteOperationError
from stream_commands import (CREATE_STREAM, DESTROY_STREAM_ALL, LIST_STREAM, StreamCommands, Table,
                             Unavailable)


class TestAvailability:

    def test_available_with_connection(self, commands):
        assert commands.available()

    def test_unavailable_without_connection(self, shell, user_input):
        shell.operations = None
        commands = StreamCommands(shell, user_input)
        assert not commands.available()

    def test_execute_returns_unavailable_signal(self, shell, user_input):
        shell.operations = None
        commands = StreamCommands(shell, user_input)
        result = commands.execute(CREATE_STREAM, name='s1', dsl='http | log')
        assert result == Unavailable(CREATE_STREAM)
        assert "'stream create'" in str(result)

    def test_execute_runs_command(self, commands, stream_operations):
        assert commands.execute(CREATE_STREAM, name='s1', dsl='http | log') == "Created new stream 's1'"
        stream_operations.create_stream.assert_called_once_with('s1', 'http | log', False)

    def test_execute_unknown_command(self, commands):
        with pytest.raises(KeyError):
            commands.execute('stream rename')


class TestListStreams:

    def test_rows(self, commands, stream_operations):
        stream_operations.list.return_value = [
            StreamDefinitionResource('ticktock', 'time | log', 'deployed'),
            StreamDefinitionResource('ingest', 'http --port=9000 | hdfs', 'undeployed'),
        ]
        table = commands.list_streams()
        assert table.headers == ['Stream Name', 'Stream Definition', 'Status']
        assert table.rows == [['ticktock', 'time | log', 'deployed'],
                              ['ingest', 'http --port=9000 | hdfs', 'undeployed']]

    def test_empty(self, commands, stream_operations):
        stream_operations.list.return_value = []
        assert commands.execute(LIST_STREAM).rows == []


class TestTable:

    def test_render(self):
        table = Table(['Stream Name', 'Stream Definition', 'Status'])
        table.add_row('s1', 'http | log', 'deployed')
        table.add_row('second', 'time | log', None)
        lines = table.render().splitlines()
        assert lines[0] == 'Stream Name  Stream Definition  Status'
        assert lines[1] == '-----------  -----------------  --------'
        assert lines[2] == 's1           http | log         deployed'
        assert lines[3] == 'second       time | log'
        assert str(table) == table.render()


class TestCreateStream:

    def test_create_and_deploy(self, commands, stream_operations):
        assert commands.create_stream('s1', 'http | log', deploy=True) == "Created and deployed new stream 's1'"
        stream_operations.create_stream.assert_called_once_with('s1', 'http | log', True)

    def test_create(self, commands, stream_operations):
        assert commands.create_stream('s1', 'http | log', deploy=False) == "Created new stream 's1'"
        stream_operations.create_stream.assert_called_once_with('s1', 'http | log', False)


class TestDeployStream:

    def test_without_properties(self, commands, stream_operations):
        assert commands.deploy_stream('s1') == "Deployed stream 's1'"
        stream_operations.deploy.assert_called_once_with('s1', {})

    def test_inline_properties(self, commands, stream_operations):
        commands.deploy_stream('s1', properties='a=1,b=2')
        stream_operations.deploy.assert_called_once_with('s1', {'a': '1', 'b': '2'})

    def test_properties_file(self, commands, stream_operations, properties_file):
        commands.deploy_stream('s1', properties_file=properties_file)
        stream_operations.deploy.assert_called_once_with('s1', {'foo': 'bar'})

    def test_both_fail_before_remote_call(self, commands, shell, properties_file):
        with pytest.raises(ConflictingOptionsError):
            commands.deploy_stream('s1', properties='a=1', properties_file=properties_file)
        shell.operations.stream_operations.assert_not_called()

    def test_malformed_properties_fail_before_remote_call(self, commands, shell):
        with pytest.raises(MalformedPropertiesError):
            commands.deploy_stream('s1', properties='bad')
        shell.operations.stream_operations.assert_not_called()

    def test_missing_file_fails_before_remote_call(self, commands, shell, tmp_path):
        with pytest.raises(FileReadError):
            commands.deploy_stream('s1', properties_file=tmp_path / 'missing.properties')
        shell.operations.stream_operations.assert_not_called()

    def test_configured_encoding(self, shell, user_input, stream_operations, tmp_path):
        path = tmp_path / 'utf8.properties'
        path.write_text('name=café\n', encoding='utf-8')
        StreamCommands(shell, user_input, 'utf-8').deploy_stream('s1', properties_file=path)
        stream_operations.deploy.assert_called_once_with('s1', {'name': 'café'})


class TestUndeployAndDestroy:

    def test_undeploy(self, commands, stream_operations):
        assert commands.undeploy_stream('s1') == "Un-deployed stream 's1'"
        stream_operations.undeploy.assert_called_once_with('s1')

    def test_destroy(self, commands, stream_operations):
        assert commands.destroy_stream('s1') == "Destroyed stream 's1'"
        stream_operations.destroy.assert_called_once_with('s1')

    def test_remote_error_propagates(self, commands, stream_operations):
        stream_operations.destroy.side_effect = RemoteOperationError('Could not find stream', 404)
        with pytest.raises(RemoteOperationError) as excinfo:
            commands.destroy_stream('s1')
        assert excinfo.value.status == 404


class TestUndeployAllStreams:

    def test_declined(self, commands, user_input, shell):
        user_input.prompt_with_options.return_value = 'n'
        assert commands.undeploy_all_streams(force=False) == ''
        user_input.prompt_with_options.assert_called_once_with('Really undeploy all streams?', 'n', 'y', 'n')
        shell.operations.stream_operations.assert_not_called()

    @pytest.mark.parametrize('answer', ['y', 'Y'])
    def test_confirmed(self, commands, user_input, stream_operations, answer):
        user_input.prompt_with_options.return_value = answer
        assert commands.undeploy_all_streams() == 'Un-deployed all the streams'
        stream_operations.undeploy_all.assert_called_once_with()

    def test_forced(self, commands, user_input, stream_operations):
        assert commands.undeploy_all_streams(force=True) == 'Un-deployed all the streams'
        stream_operations.undeploy_all.assert_called_once_with()
        user_input.prompt_with_options.assert_not_called()


class TestDestroyAllStreams:

    def test_declined(self, commands, user_input, shell):
        user_input.prompt_with_options.return_value = 'yes please'
        assert commands.destroy_all_streams() == ''
        user_input.prompt_with_options.assert_called_once_with('Really destroy all streams?', 'n', 'y', 'n')
        shell.operations.stream_operations.assert_not_called()

    def test_confirmed(self, commands, user_input, stream_operations):
        user_input.prompt_with_options.return_value = 'y'
        assert commands.execute(DESTROY_STREAM_ALL, force=False) == 'Destroyed all streams'
        stream_operations.destroy_all.assert_called_once_with()

    def test_forced(self, commands, user_input, stream_operations):
        assert commands.destroy_all_streams(force=True) == 'Destroyed all streams'
        stream_operations.destroy_all.assert_called_once_with()
        user_input.prompt_with_options.assert_not_called()
