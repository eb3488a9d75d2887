"""Tests for the folder_bridge command line entry point."""
import socket
import threading

import pytest

from folder_bridge import __main__ as cli


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    calls = []
    monkeypatch.setattr(cli, 'configure_logging', lambda **kw: calls.append(kw))
    return calls


@pytest.fixture
def stopped():
    event = threading.Event()
    event.set()
    return event


class TestParseArgs:

    def test_defaults(self, monkeypatch):
        for var in ('FOLDER_BRIDGE_HOST', 'FOLDER_BRIDGE_PORT',
                    'FOLDER_BRIDGE_REQUIRE_PAIRING', 'FOLDER_BRIDGE_PIN_TTL'):
            monkeypatch.delenv(var, raising=False)
        args = cli.parse_args(['/tmp/share'])
        assert args.folder == '/tmp/share'
        assert args.host == '127.0.0.1'
        assert args.port == 3000
        assert args.pairing is True
        assert args.pin_ttl is None

    def test_overrides(self):
        args = cli.parse_args([
            'photos', '--host', '0.0.0.0', '--port', '8123',
            '--no-pairing', '--pin-ttl', '120', '--log-format', 'json',
        ])
        assert args.host == '0.0.0.0'
        assert args.port == 8123
        assert args.pairing is False
        assert args.pin_ttl == 120.0
        assert args.log_format == 'json'

    def test_folder_required(self):
        with pytest.raises(SystemExit):
            cli.parse_args([])


class TestMain:

    def test_serves_then_exits_cleanly(self, shared_root, stopped, capsys):
        code = cli.main([str(shared_root), '--port', '0'], stop_event=stopped)
        assert code == 0
        out = capsys.readouterr().out
        assert 'Address: http://127.0.0.1:' in out
        assert 'PIN: ' in out

    def test_no_pairing_hides_pin(self, shared_root, stopped, capsys):
        code = cli.main([str(shared_root), '--port', '0', '--no-pairing'], stop_event=stopped)
        assert code == 0
        assert 'PIN: ' not in capsys.readouterr().out

    def test_log_format_passed_through(self, shared_root, stopped, _no_logging_setup):
        cli.main([str(shared_root), '--port', '0', '--log-format', 'json'], stop_event=stopped)
        assert _no_logging_setup == [{'level': None, 'json_output': True}]

    def test_bind_failure_exit_code(self, shared_root, stopped):
        blocker = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        blocker.bind(('127.0.0.1', 0))
        blocker.listen(1)
        try:
            port = str(blocker.getsockname()[1])
            assert cli.main([str(shared_root), '--port', port], stop_event=stopped) == 2
        finally:
            blocker.close()

    def test_missing_folder_exit_code(self, tmp_path, stopped):
        assert cli.main([str(tmp_path / 'missing'), '--port', '0'], stop_event=stopped) == 1

    def test_invalid_config_exit_code(self, shared_root, stopped):
        assert cli.main([str(shared_root), '--port', '70000'], stop_event=stopped) == 1
