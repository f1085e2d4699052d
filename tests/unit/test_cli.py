from typer.testing import CliRunner

from reqbridge.presentation.cli.main import app

runner = CliRunner()


def test_status_command():
    result = runner.invoke(app, ["status", "404", "--message", "whatever"])
    assert result.exit_code == 0
    assert "HTTP/1.1 404 Not Found" in result.stdout


def test_status_command_rejects_unknown_code():
    assert runner.invoke(app, ["status", "42"]).exit_code == 2


def test_emit_command():
    result = runner.invoke(app, ["emit", "post", "https://api.test/x", "-H", "X-A: 1", "--json", '{"n": 1}', "--name", "send"])
    assert result.exit_code == 0
    assert "async function send()" in result.stdout
    assert '[["X-A","1"],["Content-Type","application/json"]]' in result.stdout
