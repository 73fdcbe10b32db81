"""Tests for the command line interface."""

from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from drainstop.main import cli


def test_config_show_prints_summary():
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--output", "plain", "config", "show"],
        env={"PORT": "8081", "APP_ENV": "test"}
    )

    assert result.exit_code == 0
    assert "Listen: 0.0.0.0:8081" in result.output
    assert "Environment: test" in result.output


def test_config_show_rejects_invalid_environment():
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--output", "plain", "config", "show"],
        env={"PORT": "99999"}
    )

    assert result.exit_code == 1
    assert "port must be between 0 and 65535" in result.output


def test_serve_applies_overrides_and_exits_with_controller_code():
    runner = CliRunner()
    with patch("drainstop.modules.server.command.serve.serve", new=AsyncMock(return_value=1)) as serve:
        result = runner.invoke(
            cli, ["--output", "plain", "serve", "--port", "6000", "--shutdown-timeout", "2"],
            env={"HOST": "127.0.0.1"}
        )

    assert result.exit_code == 1
    config = serve.await_args.args[0]
    assert config.host == "127.0.0.1"
    assert config.port == 6000
    assert config.shutdown_timeout == 2.0


def test_serve_with_config_file(tmp_path):
    config_file = tmp_path / "server.yaml"
    config_file.write_text("port: 7000\n")
    runner = CliRunner()
    with patch("drainstop.modules.server.command.serve.serve", new=AsyncMock(return_value=0)) as serve:
        result = runner.invoke(cli, ["--output", "plain", "serve", "--config", str(config_file)])

    assert result.exit_code == 0
    assert serve.await_args.args[0].port == 7000
