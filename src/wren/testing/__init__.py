"""Test utilities for wren routers.

    from wren.testing import TestClient
"""

from wren.testing.client import TestClient

__all__ = ["TestClient"]
