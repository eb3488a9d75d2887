"""Static serving module for the bridge API."""
from .router import create_static_router

__all__ = ['create_static_router']
