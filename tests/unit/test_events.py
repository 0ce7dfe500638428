"""Unit tests for the event emitter."""

import asyncio

import pytest

from unbound.events import EventEmitter


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_on_and_emit(self):
        emitter = EventEmitter()
        received = []
        emitter.on("data", received.append)

        assert emitter.emit("data", 1) is True
        assert emitter.emit("other") is False
        assert received == [1]

    def test_decorator_form(self):
        emitter = EventEmitter()
        received = []

        @emitter.on("data")
        def handle(value):
            received.append(value)

        emitter.emit("data", "x")

        assert received == ["x"]
        assert handle is not None

    def test_once(self):
        emitter = EventEmitter()
        received = []
        emitter.once("data", received.append)

        emitter.emit("data", 1)
        emitter.emit("data", 2)

        assert received == [1]
        assert emitter.listener_count("data") == 0

    def test_off_removes_once_handler_by_original(self):
        emitter = EventEmitter()
        received = []

        def handle(value):
            received.append(value)

        emitter.once("data", handle)
        emitter.off("data", handle)
        emitter.emit("data", 1)

        assert received == []

    def test_handler_error_does_not_stop_others(self):
        emitter = EventEmitter()
        received = []

        def broken(value):
            raise RuntimeError("boom")

        emitter.on("data", broken)
        emitter.on("data", received.append)
        emitter.emit("data", 1)

        assert received == [1]

    def test_remove_all_listeners(self):
        emitter = EventEmitter()
        emitter.on("a", print)
        emitter.on("b", print)

        emitter.remove_all_listeners("a")
        assert emitter.listener_count("a") == 0
        assert emitter.listener_count("b") == 1

        emitter.remove_all_listeners()
        assert emitter.listener_count("b") == 0

    @pytest.mark.asyncio
    async def test_coroutine_handlers_are_scheduled(self):
        emitter = EventEmitter()
        received = []

        async def handle(value):
            await asyncio.sleep(0)
            received.append(value)

        emitter.on("data", handle)
        emitter.emit("data", "async")
        for _ in range(5):
            await asyncio.sleep(0)

        assert received == ["async"]
