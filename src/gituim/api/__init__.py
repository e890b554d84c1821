"""HTTP API for gituim."""

from gituim.api.server import APIServer, create_app

__all__ = ["APIServer", "create_app"]
