"""Shared test fixtures for webber.

Provides isolated config directories, a quiet output manager, in-memory
stores, controllable reachability probes, and helpers for building
:class:`httpx.MockTransport` servers. Discovered automatically by pytest.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Union

import httpx
import pytest

from webber.models import WebberConfig
from webber.output import OutputManager, reset_output, set_output
from webber.reachability import StaticProbe
from webber.store import MemoryStore

SERVER = "https://api.example.com"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager caches sys.stdout/sys.stderr at creation time, which go
    stale once CliRunner or capsys swap the streams back.
    """
    yield
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless OutputManager for the test."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    return output


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config/cache/data dirs into tmp_path and clear WEBBER_* vars.

    Also changes the working directory to tmp_path so that no stray
    ``webber.json`` project config is picked up.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("webber.config._is_xdg_platform", lambda: True)
    monkeypatch.delenv("WEBBER_SERVER", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Client collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def config() -> WebberConfig:
    return WebberConfig(server=SERVER)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def online() -> StaticProbe:
    return StaticProbe(True)


@pytest.fixture
def offline() -> StaticProbe:
    return StaticProbe(False)


Route = Union[str, Callable[[httpx.Request], httpx.Response]]


class MockServer:
    """Routes GETs by URL path to canned bodies or handler functions.

    Unknown paths fail with :class:`httpx.ConnectError`, the way an
    unreachable host does. Every request is recorded in :attr:`calls`.
    Bodies can be changed between requests by assigning to :attr:`routes`.
    """

    def __init__(self, routes: dict[str, Route] | None = None) -> None:
        self.routes: dict[str, Route] = dict(routes or {})
        self.calls: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            raise httpx.ConnectError(f"no route for {request.url.path}", request=request)
        if callable(route):
            return route(request)
        return httpx.Response(200, text=route)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def server() -> MockServer:
    return MockServer()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
