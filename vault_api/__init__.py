"""
vault_api package: HTTP surface (Flask) over the vault.

Exposes save / list / code / verify; never returns stored secrets.
"""

from .app import create_app

__all__ = ["create_app"]
