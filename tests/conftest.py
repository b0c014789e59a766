"""Shared fixtures: a mock dashboard server and scrape settings for it."""

import asyncio
import logging
import threading
import time
from collections.abc import Generator
from pathlib import Path

import pytest
from aiohttp import web

from collegecache.config import ScrapeSettings
from collegecache.storage import CacheStore
from tests.mock_server import MockDashboard, create_app
from tests.utils import find_free_port


class AioHttpTestServer:
    """Wrapper to run aiohttp server in a background thread."""

    def __init__(self, app: web.Application, port: int) -> None:
        self.app = app
        self.port = port
        self.host = "127.0.0.1"
        self._loop: asyncio.AbstractEventLoop | None = None
        self._runner: web.AppRunner | None = None
        self._thread: threading.Thread | None = None
        self._started = threading.Event()

    @property
    def url(self) -> str:
        """Get the base URL of the server."""
        return f"http://{self.host}:{self.port}"

    def start(self) -> None:
        """Start the server in a background thread."""
        self._thread = threading.Thread(target=self._run_server, daemon=True)
        self._thread.start()
        self._started.wait(timeout=5.0)
        time.sleep(0.05)

    def _run_server(self) -> None:
        """Run the server in an asyncio event loop."""
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        async def start() -> None:
            self._runner = web.AppRunner(self.app)
            await self._runner.setup()
            site = web.TCPSite(self._runner, self.host, self.port)
            await site.start()

        self._loop.run_until_complete(start())
        self._started.set()
        self._loop.run_forever()

    def stop(self) -> None:
        """Stop the server and clean up resources."""
        if self._loop and self._runner:
            runner = self._runner

            async def cleanup() -> None:
                await runner.cleanup()

            future = asyncio.run_coroutine_threadsafe(cleanup(), self._loop)
            try:
                future.result(timeout=2.0)
            except Exception:
                pass  # Best effort cleanup

        if self._loop:
            self._loop.call_soon_threadsafe(self._loop.stop)

        if self._thread:
            self._thread.join(timeout=2.0)


@pytest.fixture(autouse=True)
def _restore_collegecache_log_level() -> Generator[None, None, None]:
    """Undo logger levels set by configure_logging in earlier tests."""
    logger = logging.getLogger("collegecache")
    level = logger.level
    yield
    logger.setLevel(level)


@pytest.fixture
def dashboard() -> MockDashboard:
    """Fresh upstream data for each test."""
    return MockDashboard()


@pytest.fixture
def dashboard_server(
    dashboard: MockDashboard,
) -> Generator[AioHttpTestServer, None, None]:
    """Start a real HTTP server running the mock dashboard.

    Yields:
        AioHttpTestServer instance serving ``dashboard``.
    """
    server = AioHttpTestServer(create_app(dashboard), find_free_port())
    server.start()
    yield server
    server.stop()


@pytest.fixture
def server_url(dashboard_server: AioHttpTestServer) -> str:
    """Base URL of the mock dashboard (e.g., "http://127.0.0.1:8080")."""
    return dashboard_server.url


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "output"


@pytest.fixture
def settings(server_url: str, output_dir: Path) -> ScrapeSettings:
    """Settings pointing at the mock dashboard, with no retry delay."""
    return ScrapeSettings(
        output_dir=output_dir,
        index_url_template=f"{server_url}/index?state={{state}}",
        detail_url_template=f"{server_url}/detail?aicteid={{record_id}}",
        retry_delay=0.0,
        timeout=5.0,
    )


@pytest.fixture
def store(output_dir: Path) -> CacheStore:
    return CacheStore(output_dir)
