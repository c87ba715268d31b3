import os

import yaml
from click.testing import CliRunner

from fabtopo.CLI.main import cli
from fabtopo.RUNNERS.recording_runner import RecordingRunner


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'topology' in result.output
    assert 'provision' in result.output


def test_topology_to_stdout(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        cli, ['topology', 'dev', '-m', 'a', '-m', 'b'],
        env={'FABTOPO_STACKS_DIR': str(tmp_path)},
    )
    assert result.exit_code == 0
    document = yaml.safe_load(result.output)
    assert list(document['services'])[3:] == ['fabconnect_a', 'fabconnect_b']


def test_topology_from_stack_file(tmp_path):
    stack_file = tmp_path / "stack.yml"
    stack_file.write_text("name: dev\nmembers: [a]\n")
    out = tmp_path / "docker-compose.yml"

    runner = CliRunner()
    result = runner.invoke(
        cli, ['topology', '-s', str(stack_file), '-c', 'fabconnect', '-o', str(out)],
        env={'FABTOPO_STACKS_DIR': str(tmp_path)},
    )
    assert result.exit_code == 0
    with open(out) as f:
        document = yaml.safe_load(f)
    assert document['services']['fabconnect_a']['ports'] == ['5102:3000']


def test_topology_requires_stack():
    runner = CliRunner()
    result = runner.invoke(cli, ['topology'])
    assert result.exit_code != 0


def test_topology_rejects_duplicate_members():
    runner = CliRunner()
    result = runner.invoke(cli, ['topology', 'dev', '-m', 'a', '-m', 'a'])
    assert result.exit_code != 0


def test_provision_runs_both_tools(tmp_path):
    recorder = RecordingRunner()
    runner = CliRunner()
    result = runner.invoke(
        cli, ['provision', 'dev'],
        obj={'runner': recorder},
        env={'FABTOPO_STACKS_DIR': str(tmp_path)},
    )
    assert result.exit_code == 0
    assert all('hyperledger/fabric-tools' in c.argv for c in recorder.calls)
    assert 'cryptogen' in recorder.calls[0].argv
    assert 'configtxgen' in recorder.calls[1].argv
    assert os.path.exists(tmp_path / 'dev' / 'blockchain' / 'cryptogen.yaml')


def test_provision_failure_exit_code(tmp_path):
    recorder = RecordingRunner(exit_code=1)
    runner = CliRunner()
    result = runner.invoke(
        cli, ['provision', 'dev'],
        obj={'runner': recorder},
        env={'FABTOPO_STACKS_DIR': str(tmp_path)},
    )
    assert result.exit_code == 1
    assert 'cryptogen exited with status 1' in result.output
    # genesis never attempted after crypto material failed
    assert len(recorder.calls) == 1


def test_provision_writes_connector_configuration(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        cli, ['provision', 'dev', '-m', 'a'],
        obj={'runner': RecordingRunner()},
        env={'FABTOPO_STACKS_DIR': str(tmp_path)},
    )
    assert result.exit_code == 0
    blockchain = tmp_path / 'dev' / 'blockchain'
    assert os.path.exists(blockchain / 'ccp.yaml')
    assert os.path.exists(blockchain / 'fabconnect' / 'a' / 'fabconnect.yaml')


def test_malformed_stack_file(tmp_path):
    stack_file = tmp_path / "stack.yml"
    stack_file.write_text("name: [dev\n")
    runner = CliRunner()
    result = runner.invoke(cli, ['topology', '-s', str(stack_file)])
    assert result.exit_code == 2
    assert 'not valid YAML' in result.output


def test_stack_file_conflicts_with_name(tmp_path):
    stack_file = tmp_path / "stack.yml"
    stack_file.write_text("name: dev\n")
    runner = CliRunner()
    result = runner.invoke(cli, ['topology', 'other', '-m', 'a', '-s', str(stack_file)])
    assert result.exit_code == 2
    assert 'cannot be combined' in result.output
