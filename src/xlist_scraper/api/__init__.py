"""HTTP surface."""

from .app import create_app, result_response, serve

__all__ = ["create_app", "result_response", "serve"]
