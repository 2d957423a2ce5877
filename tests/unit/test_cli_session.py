"""Tests for the probe and serve commands."""
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from nesbridge.cli import cli
from nesbridge.config import Config, set_config
from nesbridge.errors import RomNotFound


@pytest.fixture
def runner():
    return CliRunner()


def test_probe_reports_success(runner, reset_global_config):
    set_config(Config(server={"port": 8123}))

    with patch('nesbridge.cli.session.probe_status', new=AsyncMock(return_value=200)) as mock_probe:
        result = runner.invoke(cli, ['probe'])

    assert result.exit_code == 0
    assert "http://127.0.0.1:8123/ -> 200" in result.output
    mock_probe.assert_awaited_once_with("http://127.0.0.1:8123/", 5.0)


def test_probe_port_override(runner, reset_global_config):
    set_config(Config())

    with patch('nesbridge.cli.session.probe_status', new=AsyncMock(return_value=200)) as mock_probe:
        result = runner.invoke(cli, ['probe', '--port', '9000'])

    assert result.exit_code == 0
    mock_probe.assert_awaited_once_with("http://127.0.0.1:9000/", 5.0)


def test_probe_no_response(runner, reset_global_config):
    set_config(Config())

    with patch('nesbridge.cli.session.probe_status', new=AsyncMock(return_value=None)):
        result = runner.invoke(cli, ['probe'])

    assert result.exit_code == 1
    assert "No response" in result.output


def test_probe_error_status(runner, reset_global_config):
    set_config(Config())

    with patch('nesbridge.cli.session.probe_status', new=AsyncMock(return_value=500)):
        result = runner.invoke(cli, ['probe'])

    assert result.exit_code == 1


def test_serve_unknown_rom_aborts(runner, reset_global_config, bundle_dirs, free_port):
    bundle, library, work = bundle_dirs
    set_config(Config(paths={
        "bundle_dir": str(bundle),
        "library_dir": str(library),
        "work_dir": str(work),
    }))

    with patch('nesbridge.cli.session.SessionSupervisor.launch',
               new=AsyncMock(side_effect=RomNotFound("missing.nes"))):
        result = runner.invoke(cli, ['serve', 'missing.nes', '--port', str(free_port)])

    assert result.exit_code != 0
    assert "ROM not found: missing.nes" in result.output
