"""Test utilities for wren applications::

    from wren.testing import TestClient
"""

from wren.testing.client import ClientResponse, TestClient

__all__ = ["ClientResponse", "TestClient"]
