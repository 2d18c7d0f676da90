"""Testing utilities for switchboard applications.

Usage::

    from switchboard.testing import TestClient

    async with TestClient(app) as client:
        response = await client.get("/ping")
        assert response.status == 200
"""

from switchboard.testing.client import TestClient

__all__ = ["TestClient"]
