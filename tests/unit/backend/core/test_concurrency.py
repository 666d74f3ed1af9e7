"""Unit tests for noteapp.backend.core.concurrency."""

import contextvars
import threading
from unittest.mock import MagicMock, patch

import pytest
import structlog

from noteapp.backend.core.concurrency import (
    TracedThreadPoolExecutor,
    get_io_pool,
    run_blocking,
    shutdown_pools,
)
import noteapp.backend.core.concurrency as concurrency_module


@pytest.fixture(autouse=True)
def _reset_pool():
    """Reset global pool state before and after each test."""
    concurrency_module._io_pool = None
    yield
    if concurrency_module._io_pool is not None:
        concurrency_module._io_pool.shutdown(wait=False)
        concurrency_module._io_pool = None


def _mock_concurrency_config(thread_max=4):
    """Create a mock concurrency config."""
    mock_config = MagicMock()
    mock_config.concurrency.thread_pool.max_workers = thread_max
    return mock_config


class TestTracedThreadPoolExecutor:
    def test_propagates_contextvars(self):
        """Contextvars set in the caller should be visible in the worker thread."""
        test_var = contextvars.ContextVar("test_var", default="default")
        test_var.set("from_caller")

        executor = TracedThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(test_var.get)
            assert future.result(timeout=5) == "from_caller"
        finally:
            executor.shutdown(wait=True)

    def test_propagates_structlog_context(self):
        """Structlog contextvars should be available in worker threads."""
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(source="tui")

        executor = TracedThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(structlog.contextvars.get_contextvars)
            assert future.result(timeout=5).get("source") == "tui"
        finally:
            executor.shutdown(wait=True)
            structlog.contextvars.clear_contextvars()


class TestGetIoPool:
    @patch("noteapp.backend.core.config.get_app_config")
    def test_creates_pool_lazily(self, mock_get_config):
        mock_get_config.return_value = _mock_concurrency_config(thread_max=4)

        pool1 = get_io_pool()
        pool2 = get_io_pool()
        assert pool1 is pool2
        assert isinstance(pool1, TracedThreadPoolExecutor)
        assert pool1._max_workers == 4

    @patch("noteapp.backend.core.config.get_app_config")
    def test_uses_config_max_workers(self, mock_get_config):
        mock_get_config.return_value = _mock_concurrency_config(thread_max=8)

        assert get_io_pool()._max_workers == 8


class TestRunBlocking:
    @pytest.mark.asyncio
    @patch("noteapp.backend.core.config.get_app_config")
    async def test_runs_off_the_event_loop_thread(self, mock_get_config):
        mock_get_config.return_value = _mock_concurrency_config()

        worker_thread = await run_blocking(threading.get_ident)
        assert worker_thread != threading.get_ident()

    @pytest.mark.asyncio
    @patch("noteapp.backend.core.config.get_app_config")
    async def test_passes_keyword_arguments(self, mock_get_config, tmp_path):
        mock_get_config.return_value = _mock_concurrency_config()
        path = tmp_path / "note.txt"
        path.write_text("hello", encoding="utf-8")

        assert await run_blocking(path.read_text, encoding="utf-8") == "hello"


class TestShutdownPools:
    @pytest.mark.asyncio
    @patch("noteapp.backend.core.config.get_app_config")
    async def test_shutdown_releases_pool(self, mock_get_config):
        mock_get_config.return_value = _mock_concurrency_config()
        get_io_pool()

        await shutdown_pools()
        assert concurrency_module._io_pool is None

    @pytest.mark.asyncio
    async def test_shutdown_without_pool_is_noop(self):
        await shutdown_pools()
        assert concurrency_module._io_pool is None
