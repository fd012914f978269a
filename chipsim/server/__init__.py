"""
ChipSim Server - FastAPI adapter around the poker engine
"""

from chipsim.server.app import create_app

__all__ = ["create_app"]
