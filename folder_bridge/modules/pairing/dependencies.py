"""Request-level pairing enforcement."""
from fastapi import Request

from ...errors import PairingRequiredError
from ...pairing import TOKEN_COOKIE, TOKEN_HEADER, TOKEN_QUERY, PairingGate


COOKIE_METHODS = frozenset({'GET', 'HEAD'})


def token_from_request(request: Request) -> str | None:
    """Pick the bridge token from header, cookie or query string, in that order.

    The cookie counts for GET and HEAD only; requests that change files
    must carry the header or query token.
    """
    cookie = request.cookies.get(TOKEN_COOKIE) if request.method in COOKIE_METHODS else None
    return (
        request.headers.get(TOKEN_HEADER)
        or cookie
        or request.query_params.get(TOKEN_QUERY)
    )


def require_pairing(request: Request) -> None:
    """Reject the request unless it carries a token issued by the gate.

    Apps built without a gate (pairing disabled) let every request through.
    """
    gate: PairingGate | None = getattr(request.app.state, 'pairing_gate', None)
    if gate is None:
        return
    if not gate.is_authorized(token_from_request(request)):
        raise PairingRequiredError('Pair with the session PIN first', operation='authorize')
