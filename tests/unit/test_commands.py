"""Unit tests for the UI command surface."""
import pytest

from folder_bridge.commands import BridgeCommands
from folder_bridge.errors import (
    AlreadySharingError,
    EntryNotFoundError,
    NotSharingError,
    PathEscapeError,
)
from folder_bridge.session import SessionController


@pytest.fixture
def commands(bridge_config):
    cmds = BridgeCommands(SessionController(bridge_config))
    yield cmds
    cmds.stop_sharing()


class TestSharingCommands:

    def test_start_sharing_echoes_path(self, commands, shared_root):
        assert commands.start_sharing(str(shared_root)) == str(shared_root)

    def test_generate_pin_shows_in_session_info(self, commands, shared_root):
        pin = commands.generate_pin()
        commands.start_sharing(str(shared_root))
        info = commands.session_info()
        assert info['pin'] == pin
        assert info['root'] == str(shared_root.resolve())
        assert info['status'] in ('starting', 'running')

    def test_session_info_idle(self, commands):
        assert commands.session_info() is None

    def test_already_sharing(self, commands, shared_root):
        commands.start_sharing(str(shared_root))
        with pytest.raises(AlreadySharingError):
            commands.start_sharing(str(shared_root))

    def test_stop_then_idle(self, commands, shared_root):
        commands.start_sharing(str(shared_root))
        commands.stop_sharing()
        assert commands.session_info() is None


class TestFileCommands:

    @pytest.fixture(autouse=True)
    def _sharing(self, commands, shared_root):
        commands.start_sharing(str(shared_root))

    def test_list_files_absolute_paths(self, commands, shared_root):
        entries = {e['name']: e for e in commands.list_files()}
        assert set(entries) == {'notes.txt', 'photos'}
        assert entries['notes.txt']['path'] == (shared_root.resolve() / 'notes.txt').as_posix()
        assert entries['photos']['is_directory'] is True

    def test_write_read_roundtrip(self, commands):
        commands.write_file('new.bin', b'\x00\xffdata')
        assert commands.read_file('new.bin') == b'\x00\xffdata'

    def test_create_and_delete_directory(self, commands, shared_root):
        commands.create_directory('albums/2024')
        assert (shared_root / 'albums' / '2024').is_dir()
        commands.delete_file('albums')
        assert not (shared_root / 'albums').exists()

    def test_errors_are_typed(self, commands):
        with pytest.raises(EntryNotFoundError):
            commands.read_file('missing.txt')
        with pytest.raises(PathEscapeError):
            commands.list_files('../..')


class TestNotSharing:

    def test_file_commands_need_session(self, commands):
        with pytest.raises(NotSharingError):
            commands.list_files()
        with pytest.raises(NotSharingError):
            commands.write_file('x.txt', b'x')
