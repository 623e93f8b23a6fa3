"""HTTP API serving the spread and opportunity feeds."""

from arbsignals.api.server import create_app, serve


__all__ = [
    "create_app",
    "serve",
]
