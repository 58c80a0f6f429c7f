"""API interface for Minions.

This module exports the FastAPI router and app factory.
"""

from minions.interfaces.api.routes import create_app, router

__all__ = ["router", "create_app"]
