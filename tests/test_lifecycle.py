"""Tests for background cache warmup."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock

from bmcinfo.lifecycle import warm_up_after_setup, warm_up_on_start
from bmcinfo.models import ControllerSettings, SystemInformation


class TestWarmUpOnStart:
    """Test startup warmup decisions."""

    def test_configured_warms_cache(self):
        cache = MagicMock()
        cache.get.return_value = SystemInformation(model="ProLiant")

        thread = warm_up_on_start(cache, lambda: True)
        thread.join(timeout=5)

        assert thread.daemon is True
        cache.get.assert_called_once_with()

    def test_not_configured_defers(self):
        cache = MagicMock()

        warm_up_on_start(cache, lambda: False).join(timeout=5)

        cache.get.assert_not_called()

    def test_check_failure_skips_warmup(self):
        """A raising readiness check is treated as not configured."""
        cache = MagicMock()
        is_configured = MagicMock(side_effect=RuntimeError("disk error"))

        thread = warm_up_on_start(cache, is_configured)
        thread.join(timeout=5)

        is_configured.assert_called_once_with()
        cache.get.assert_not_called()
        assert not thread.is_alive()

    def test_get_failure_does_not_escape(self):
        cache = MagicMock()
        cache.get.side_effect = RuntimeError("boom")

        thread = warm_up_on_start(cache, lambda: True)
        thread.join(timeout=5)

        cache.get.assert_called_once_with()
        assert not thread.is_alive()


class TestWarmUpAfterSetup:
    """Test the setup listener."""

    def test_listener_refreshes_cache(self):
        refreshed = threading.Event()
        cache = MagicMock()
        def _refresh():
            refreshed.set()
            return SystemInformation(model="ProLiant")

        cache.refresh.side_effect = _refresh
        listener = warm_up_after_setup(cache)

        listener(ControllerSettings(host="10.0.0.5", username="admin", password="pw"))

        assert refreshed.wait(timeout=5)
        cache.refresh.assert_called_once_with()
        cache.get.assert_not_called()

    def test_unavailable_result_is_refreshed_again(self):
        """A joined pre-setup fetch that came back unavailable does not stick for the TTL."""
        done = threading.Event()
        results = iter([SystemInformation.unavailable(), SystemInformation(model="ProLiant")])
        cache = MagicMock()

        def _refresh():
            info = next(results)
            if info.is_available:
                done.set()
            return info

        cache.refresh.side_effect = _refresh

        warm_up_after_setup(cache)(ControllerSettings(host="10.0.0.5", username="admin", password="pw"))

        assert done.wait(timeout=5)
        assert cache.refresh.call_count == 2

    def test_listener_does_not_block_caller(self):
        release = threading.Event()
        started = threading.Event()
        cache = MagicMock()

        def _refresh():
            started.set()
            release.wait(timeout=5)
            return SystemInformation(model="ProLiant")

        cache.refresh.side_effect = _refresh

        warm_up_after_setup(cache)(ControllerSettings(host="10.0.0.5", username="admin", password="pw"))

        assert started.wait(timeout=5)
        assert not release.is_set()
        release.set()


class TestWarmUpDoesNotBlock:
    """Startup warmup returns while the check or the fetch is still running."""

    def test_blocking_readiness_check(self):
        release = threading.Event()
        cache = MagicMock()

        def _is_configured():
            release.wait(timeout=5)
            return True

        thread = warm_up_on_start(cache, _is_configured)

        assert thread.is_alive()
        cache.get.assert_not_called()

        release.set()
        thread.join(timeout=5)
        assert not thread.is_alive()
        cache.get.assert_called_once_with()

    def test_blocking_cache_get(self):
        release = threading.Event()
        fetching = threading.Event()
        cache = MagicMock()

        def _get():
            fetching.set()
            release.wait(timeout=5)
            return SystemInformation(model="ProLiant")

        cache.get.side_effect = _get

        thread = warm_up_on_start(cache, lambda: True)

        assert fetching.wait(timeout=5)
        assert thread.is_alive()

        release.set()
        thread.join(timeout=5)
        assert not thread.is_alive()
