"""HTTP surface for the matching and engagement engine."""
from .main import create_app

__all__ = ["create_app"]
