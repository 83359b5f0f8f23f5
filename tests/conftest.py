from __future__ import annotations

import httpx
import pytest


def ok_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, text="ok")


def refused_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


@pytest.fixture
def ok_transport() -> httpx.MockTransport:
    return httpx.MockTransport(ok_handler)


@pytest.fixture
def refused_transport() -> httpx.MockTransport:
    return httpx.MockTransport(refused_handler)
