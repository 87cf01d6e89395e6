"""Pytest configuration and shared fixtures."""

from typing import Any, List
from unittest.mock import AsyncMock

import httpx
import pytest

from orderdesk.resilience import ResilienceConfig


class ScriptedUpstream:
    """
    httpx.MockTransport handler replaying a fixed script.

    Each step is an httpx exception class (raised for that request), a
    ``(status, body)`` tuple, or a callable building the response. The last
    step repeats once the script runs out.
    """

    def __init__(self, *steps: Any):
        self.steps = list(steps)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.steps.pop(0) if len(self.steps) > 1 else self.steps[0]

        if isinstance(step, type) and issubclass(step, Exception):
            raise step("scripted failure", request=request)

        if callable(step):
            return step()

        status, body = step
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def make_upstream():
    """Build a scripted upstream and an AsyncClient routed to it."""
    def factory(*steps):
        upstream = ScriptedUpstream(*steps)
        client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
        return upstream, client

    return factory


@pytest.fixture
def fake_sleep():
    """Sleep replacement recording backoff delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def resilience_config():
    """Default resilience settings (5s connect, 10s read, 3 attempts)."""
    return ResilienceConfig()


@pytest.fixture
def paulista_address():
    """ViaCEP body for Avenida Paulista."""
    return {
        "cep": "01310-100",
        "logradouro": "Avenida Paulista",
        "complemento": "lado ímpar",
        "bairro": "Bela Vista",
        "localidade": "São Paulo",
        "uf": "SP",
        "ibge": "3550308",
        "gia": "1004",
        "ddd": "11",
        "siafi": "7107",
    }
