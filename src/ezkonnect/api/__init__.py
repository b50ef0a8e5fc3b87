"""
REST API layer for ezkonnect.

Provides a FastAPI application factory with typed endpoints that
delegate to the operations layer (``ezkonnect.ops``).  This package
handles only HTTP transport concerns: body decoding, error mapping and
request context.

Quick start::

    from ezkonnect.api import create_app

    app = create_app()  # ready for uvicorn
"""

from ezkonnect.api.app import create_app

__all__ = ["create_app"]
