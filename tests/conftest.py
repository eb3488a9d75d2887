"""Pytest configuration for folder_bridge tests."""
import sys
from pathlib import Path

# Make the package importable without an editable install
_PROJECT_ROOT = Path(__file__).parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

import pytest

from folder_bridge.config import BridgeConfig


@pytest.fixture
def shared_root(tmp_path):
    """Create a temporary shared folder with a small tree."""
    root = tmp_path / 'shared'
    root.mkdir()
    (root / 'notes.txt').write_text('hello notes')
    (root / 'photos').mkdir()
    (root / 'photos' / 'cat.jpg').write_bytes(b'\xff\xd8\xff\xe0fake-jpeg')
    return root


@pytest.fixture
def bridge_config():
    """Config bound to an ephemeral loopback port with fast timeouts."""
    return BridgeConfig(
        host='127.0.0.1',
        port=0,
        require_pairing=True,
        pin_ttl_seconds=None,
        max_pair_attempts=3,
        pair_window_seconds=60.0,
        stop_timeout_seconds=5.0,
        cors_origins=['*'],
    )
