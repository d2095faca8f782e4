"""Browser upload surface built on Flask."""

from .app import SessionRegistry, create_app

__all__ = ["SessionRegistry", "create_app"]
