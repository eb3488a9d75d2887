"""Pydantic schemas for the pairing handshake."""
from pydantic import BaseModel, Field


class PairRequest(BaseModel):
    """Request body carrying the PIN typed on the remote device."""
    pin: str = Field(..., min_length=1, max_length=32)


class PairResponse(BaseModel):
    token: str
    root_name: str
