"""HTTP API module."""

from .endpoints import get_certificate_service, router

__all__ = ["router", "get_certificate_service"]
