"""Shared fixtures: a config pointing at a fake backend and an httpx MockTransport client factory."""

from __future__ import annotations

from typing import Awaitable, Callable

import httpx
import pytest

from config import Config
from services import RobotSearchClient

BACKEND_URL = "http://backend.test"

Handler = Callable[[httpx.Request], Awaitable[httpx.Response]]


@pytest.fixture
def config() -> Config:
    return Config(BACKEND_URL=BACKEND_URL)


@pytest.fixture
def make_client(config: Config) -> Callable[[Handler], RobotSearchClient]:
    def factory(handler: Handler) -> RobotSearchClient:
        transport = httpx.MockTransport(handler)
        return RobotSearchClient(
            config.BACKEND_URL,
            endpoint=config.SEARCH_ENDPOINT,
            http_client=httpx.AsyncClient(transport=transport),
        )

    return factory
