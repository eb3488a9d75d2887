"""Pairing module for the bridge API."""
from .dependencies import require_pairing, token_from_request
from .router import create_pairing_router
from .schemas import PairRequest, PairResponse

__all__ = [
    'create_pairing_router',
    'require_pairing',
    'token_from_request',
    'PairRequest',
    'PairResponse',
]
