"""Pairing handshake route."""
from fastapi import APIRouter, Request, Response

from ...pairing import TOKEN_COOKIE, PairingGate
from .schemas import PairRequest, PairResponse


def create_pairing_router(gate: PairingGate, root_name: str) -> APIRouter:
    """Create the pairing router.

    Args:
        gate: Gate holding the session PIN and issued tokens
        root_name: Display name of the shared folder returned on success

    Returns:
        APIRouter exposing ``POST /pair``
    """
    router = APIRouter(tags=['pairing'])

    @router.post('/pair', response_model=PairResponse)
    def pair(request: Request, response: Response, body: PairRequest):
        """Exchange the session PIN for a bridge token.

        The token is returned in the body and set as a cookie so a plain
        browser can browse the static share after pairing. The cookie only
        authorizes reads; changes need the token in the header.
        """
        client = request.client.host if request.client else 'unknown'
        token = gate.pair(body.pin, client=client)
        response.set_cookie(TOKEN_COOKIE, token, httponly=True, samesite='strict')
        return PairResponse(token=token, root_name=root_name)

    return router
