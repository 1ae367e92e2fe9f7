"""Tests for StoreHandle one-time opening."""

import threading

import pytest

from clients.store import StoreHandle


class _Closable:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class TestOpen:

    def test_opens_lazily(self):
        """Factory is not called until open()."""
        calls = []
        handle = StoreHandle(lambda: calls.append(1) or _Closable())
        assert handle.is_open is False
        assert calls == []

    def test_repeated_open_returns_same_store(self):
        calls = []

        def factory():
            calls.append(1)
            return _Closable()

        handle = StoreHandle(factory)
        first = handle.open()
        second = handle.open()

        assert first is second
        assert len(calls) == 1
        assert handle.is_open is True

    def test_concurrent_first_open_calls_factory_once(self):
        """Many threads racing on the first open() share one store."""
        calls = []
        gate = threading.Barrier(8)

        def factory():
            calls.append(1)
            return _Closable()

        handle = StoreHandle(factory)
        results = []

        def worker():
            gate.wait()
            results.append(handle.open())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert all(r is results[0] for r in results)

    def test_failed_open_can_be_retried(self):
        attempts = []

        def factory():
            attempts.append(1)
            if len(attempts) == 1:
                raise ConnectionError("down")
            return _Closable()

        handle = StoreHandle(factory)
        with pytest.raises(ConnectionError):
            handle.open()
        assert handle.is_open is False
        assert handle.open() is not None
        assert len(attempts) == 2


class TestClose:

    def test_close_closes_and_forgets_store(self):
        store = _Closable()
        handle = StoreHandle(lambda: store)
        handle.open()
        handle.close()
        assert store.closed is True
        assert handle.is_open is False

    def test_close_before_open_is_noop(self):
        handle = StoreHandle(_Closable)
        handle.close()
        assert handle.is_open is False
