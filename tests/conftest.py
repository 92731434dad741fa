import json

import pytest

from square_commerce.client import SquareClient
from square_commerce.transport import Transport, TransportResponse


class RecordingTransport(Transport):
    """Transport stub that replays queued responses and records every call"""

    def __init__(self):
        self.calls = []
        self.responses = []
        self.closed = False

    def queue(self, body=None, status_code=200, headers=None):
        if body is None:
            raw = b""
        elif isinstance(body, (bytes, str)):
            raw = body.encode("utf-8") if isinstance(body, str) else body
        else:
            raw = json.dumps(body).encode("utf-8")
        self.responses.append(TransportResponse(status_code=status_code, body=raw,
                                                headers=headers or {}))
        return self

    async def send(self, method, url, *, headers, json=None, params=None):
        self.calls.append({
            "method": method,
            "url": url,
            "headers": dict(headers),
            "json": json,
            "params": params,
        })
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        return self.responses.pop(0)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def client(transport):
    return SquareClient("test_token", transport=transport)
