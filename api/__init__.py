"""Webhook and maintenance HTTP API."""

from .app import create_api_app

__all__ = ["create_api_app"]
