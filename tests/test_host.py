"""Tests for SagaHost, the headless host binding."""

from __future__ import annotations

import asyncio
import logging

import pytest

from sagaflow import (
    InterpreterStateError,
    InterpreterStatus,
    ProducerError,
    SagaHost,
    UnknownEffectError,
    await_for,
    compute,
    render,
    saga,
    use_state,
)


async def delayed(value, delay: float = 0.001):
    await asyncio.sleep(delay)
    return value


class TestBasicSaga:
    def test_returns_final_artifact(self) -> None:
        @saga
        def greeting():
            return "<span>Hi Saga</span>"
            yield

        assert SagaHost(greeting).render() == "<span>Hi Saga</span>"

    def test_supports_props(self) -> None:
        @saga
        def greeting(name):
            return f"<span>Hi {name}</span>"
            yield

        assert SagaHost(greeting).render(name="Roy") == "<span>Hi Roy</span>"

    def test_updating_props_restarts_procedure(self) -> None:
        @saga
        def greeting(name):
            return f"<span>Hi {name}</span>"
            yield

        host = SagaHost(greeting)
        host.render(name="Roy")
        first = host.interpreter

        assert host.render(name="Matan") == "<span>Hi Matan</span>"
        assert host.interpreter is not first
        assert host.props == {"name": "Matan"}

    def test_same_props_keep_interpreter(self) -> None:
        items = ["a"]

        @saga
        def listing(items):
            return ",".join(items)
            yield

        host = SagaHost(listing)
        host.render(items=items)
        first = host.interpreter
        host.render(items=items)

        assert host.interpreter is first

    def test_rejects_non_callable_factory(self) -> None:
        with pytest.raises(TypeError):
            SagaHost("not a factory")  # type: ignore[arg-type]


class TestAsyncRendering:
    @pytest.mark.asyncio
    async def test_yielded_render_shows_until_awaited(self) -> None:
        updates = []

        @saga
        def loader():
            yield render("<span>loading...</span>")
            yield await_for(lambda: delayed(None))
            return "<span>awaited!</span>"

        host = SagaHost(loader, on_update=updates.append)

        assert host.render() == "<span>loading...</span>"
        assert await host.settle() == "<span>awaited!</span>"
        assert updates == ["<span>awaited!</span>"]

    @pytest.mark.asyncio
    async def test_rerun_uncached_producer_when_props_change(self) -> None:
        @saga
        def loader(name):
            awaited = yield await_for(lambda: delayed(f"async {name}"))
            return f"<span>awaited name: {awaited}</span>"

        host = SagaHost(loader)
        host.render(name="Matan")
        host.render(name="Roy")

        assert await host.settle() == "<span>awaited name: async Roy</span>"

    @pytest.mark.asyncio
    async def test_cached_producer_runs_once_across_prop_changes(self) -> None:
        calls = []

        async def fetch():
            calls.append(True)
            return "ok"

        @saga
        def loader(name):
            result = yield await_for(fetch, cache_by=[])
            return f"<span>name: {name}. promise result: {result}</span>"

        host = SagaHost(loader)
        host.render(name="Matan")
        await host.settle()
        host.render(name="Roy")

        assert await host.settle() == "<span>name: Roy. promise result: ok</span>"
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_failed_producer_raises_from_settle(self) -> None:
        async def broken():
            raise ConnectionError("offline")

        @saga
        def loader():
            yield render("loading")
            yield await_for(broken)

        host = SagaHost(loader)
        host.render()

        with pytest.raises(ProducerError) as exc_info:
            await host.settle()
        assert isinstance(exc_info.value.original, ConnectionError)
        assert host.view == "loading"

    @pytest.mark.asyncio
    async def test_unknown_effect_after_await_raises_from_settle(self, caplog) -> None:
        @saga
        def loader():
            yield await_for(lambda: delayed(1))
            yield {"type": "teleport"}

        host = SagaHost(loader)
        host.render()

        with caplog.at_level(logging.ERROR, logger="sagaflow.host"):
            with pytest.raises(UnknownEffectError, match="teleport"):
                await host.settle()

        assert isinstance(host.error, UnknownEffectError)
        assert host.interpreter.status is InterpreterStatus.TERMINATED
        assert "raised while resuming" in caplog.text

    @pytest.mark.asyncio
    async def test_procedure_error_after_await_raises_from_settle(self) -> None:
        updates = []

        @saga
        def loader():
            yield render("loading")
            value = yield await_for(lambda: delayed(0))
            return 1 / value

        host = SagaHost(loader, on_update=updates.append)
        host.render()

        with pytest.raises(ZeroDivisionError):
            await host.settle()
        assert host.view == "loading"
        assert updates == []


class TestState:
    def test_setter_rerenders_with_new_value(self) -> None:
        updates = []

        @saga
        def counter():
            count, set_count = yield use_state(0)
            return {"text": f"count: {count}", "increment": lambda: set_count(count + 1)}

        host = SagaHost(counter, on_update=updates.append)
        assert host.render()["text"] == "count: 0"

        host.view["increment"]()
        host.view["increment"]()

        assert host.view["text"] == "count: 2"
        assert [update["text"] for update in updates] == ["count: 1", "count: 2"]

    @pytest.mark.asyncio
    async def test_state_change_does_not_rerun_earlier_steps(self) -> None:
        calls = []

        async def fetch_user():
            calls.append(True)
            await asyncio.sleep(0)
            return "Ada"

        @saga
        def profile():
            user = yield await_for(fetch_user)
            expanded, set_expanded = yield use_state(False)
            return {"user": user, "expanded": expanded, "toggle": lambda: set_expanded(not expanded)}

        host = SagaHost(profile)
        host.render()
        view = await host.settle()
        view["toggle"]()

        assert host.view["expanded"] is True
        assert host.view["user"] == "Ada"
        assert len(calls) == 1

    def test_stale_setter_after_fork_is_ignored(self) -> None:
        @saga
        def counter():
            count, set_count = yield use_state(0)
            return (count, set_count)

        host = SagaHost(counter)
        _, stale_setter = host.render()
        stale_setter(5)
        interpreter = host.interpreter

        stale_setter(100)

        assert host.interpreter is interpreter
        assert host.view[0] == 5

    def test_setter_called_while_rendering(self) -> None:
        @saga
        def eager():
            value, set_value = yield use_state("initial")
            if value == "initial":
                set_value("updated")
            return value

        host = SagaHost(eager)

        assert host.render() == "updated"


class TestLifecycle:
    def test_compute_shared_across_prop_changes(self) -> None:
        calls = []

        @saga
        def component(label):
            value = yield compute(lambda: calls.append(True) or 4, [])
            return f"{label}: {value}"

        host = SagaHost(component)

        assert host.render(label="first") == "first: 4"
        assert host.render(label="second") == "second: 4"
        assert len(calls) == 1

    def test_remount_uses_fresh_memo(self) -> None:
        calls = []

        @saga
        def component():
            value = yield compute(lambda: calls.append(True) or 4, [])
            return value

        host = SagaHost(component)
        host.render()
        memo = host.memo
        host.remount()

        assert host.view is None
        assert host.render() == 4
        assert host.memo is not memo
        assert len(calls) == 2

    def test_unmount_stops_rendering(self) -> None:
        @saga
        def component():
            return "x"
            yield

        host = SagaHost(component)
        host.render()
        host.unmount()

        with pytest.raises(InterpreterStateError):
            host.render()

    def test_refresh_without_interpreter_raises(self) -> None:
        @saga
        def component():
            return "x"
            yield

        host = SagaHost(component)
        host.render()
        host.remount()

        with pytest.raises(InterpreterStateError, match="no interpreter"):
            host._refresh()


def test_saga_rejects_plain_functions() -> None:
    with pytest.raises(TypeError, match="generator function"):

        @saga
        def not_a_generator():
            return "x"
