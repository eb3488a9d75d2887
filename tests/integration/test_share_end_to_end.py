"""End-to-end: share a folder, pair a peer over HTTP, fetch what the desktop wrote."""
import time
from dataclasses import replace

import httpx
import pytest

from folder_bridge.commands import BridgeCommands
from folder_bridge.pairing import TOKEN_HEADER
from folder_bridge.session import SessionController


@pytest.fixture
def commands(bridge_config):
    cmds = BridgeCommands(SessionController(bridge_config))
    yield cmds
    cmds.stop_sharing()


def _peer(base_url):
    return httpx.Client(base_url=base_url, timeout=5, trust_env=False)


class TestShareEndToEnd:

    def test_paired_peer_reads_desktop_write(self, commands, shared_root):
        pin = commands.generate_pin()

        started = time.perf_counter()
        commands.start_sharing(str(shared_root))
        assert time.perf_counter() - started < 0.5

        commands.write_file('report.pdf', b'%PDF-1.7 fake')
        assert commands.controller.wait_until_running(timeout=10)
        base_url = commands.controller.session.address

        with _peer(base_url) as peer:
            assert peer.get('/report.pdf').status_code == 401

            paired = peer.post('/pair', json={'pin': pin})
            assert paired.status_code == 200
            token = paired.json()['token']

            r = peer.get('/report.pdf', headers={TOKEN_HEADER: token})
            assert r.status_code == 200
            assert r.content == b'%PDF-1.7 fake'

            listing = peer.get('/api/files/list', headers={TOKEN_HEADER: token})
            names = {e['name'] for e in listing.json()['entries']}
            assert {'notes.txt', 'photos', 'report.pdf'} <= names

    def test_peer_write_visible_on_desktop(self, commands, shared_root):
        pin = commands.generate_pin()
        commands.start_sharing(str(shared_root))
        assert commands.controller.wait_until_running(timeout=10)

        with _peer(commands.controller.session.address) as peer:
            token = peer.post('/pair', json={'pin': pin}).json()['token']
            r = peer.put('/api/files/write', params={'path': 'from-phone.txt'}, content=b'sent from phone',
                         headers={TOKEN_HEADER: token})
            assert r.status_code == 200

        assert commands.read_file('from-phone.txt') == b'sent from phone'

    def test_stop_sharing_closes_listener(self, commands, shared_root):
        commands.start_sharing(str(shared_root))
        assert commands.controller.wait_until_running(timeout=10)
        base_url = commands.controller.session.address

        commands.stop_sharing()

        with _peer(base_url) as peer, pytest.raises(httpx.TransportError):
            peer.get('/health')

    def test_open_share_without_pairing(self, bridge_config, shared_root):
        config = replace(bridge_config, require_pairing=False)
        with SessionController(config) as controller:
            controller.start_sharing(shared_root)
            assert controller.wait_until_running(timeout=10)
            with _peer(controller.session.address) as peer:
                r = peer.get('/photos/cat.jpg')
                health = peer.get('/health')
        assert r.status_code == 200
        assert r.content == b'\xff\xd8\xff\xe0fake-jpeg'
        assert health.json()['pairing_required'] is False
