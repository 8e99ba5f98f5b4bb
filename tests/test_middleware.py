"""Tests for the middleware chain and the built-in middlewares."""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
from unittest.mock import AsyncMock

import pytest

from rpc_dispatch import (
    AccessLogMiddleware,
    Ok,
    RecoveryMiddleware,
    TimeoutMiddleware,
    build_chain,
    query,
)

ECHO = query("echo", params=str, returns=str)


async def _echo(p, ctx):
    return Ok(p)


def _recorder(name, log):
    async def mw(request, next_handler):
        log.append(f"{name}:in")
        response = await next_handler(request)
        log.append(f"{name}:out")
        return response

    return mw


# ── build_chain ──────────────────────────────────────────────────────────


class TestBuildChain:
    def test_empty_chain_is_handler(self):
        handler = AsyncMock(return_value="done")
        chain = build_chain([], handler)
        assert asyncio.run(chain("req")) == "done"
        handler.assert_called_once_with("req")

    def test_first_is_outermost(self):
        log = []

        async def handler(req):
            log.append("handler")
            return req

        chain = build_chain([_recorder("a", log), _recorder("b", log)], handler)
        asyncio.run(chain("req"))
        assert log == ["a:in", "b:in", "handler", "b:out", "a:out"]


# ── Ordering on the server ───────────────────────────────────────────────


class TestServerMiddlewareOrder:
    def test_last_added_runs_first(self, server, make_request):
        log = []
        srv = (
            server.with_implementation(ECHO, _echo)
            .with_middleware(_recorder("m1", log))
            .with_middleware(_recorder("m2", log))
        )
        out = asyncio.run(srv.serve()(make_request("echo", '"hi"')))
        assert out == '"hi"'
        assert log == ["m2:in", "m1:in", "m1:out", "m2:out"]

    def test_short_circuit_skips_inner_layers(self, server, make_request, definition):
        log = []
        impl = AsyncMock(return_value=Ok("x"))

        async def deny(request, next_handler):
            log.append("m2")
            return "denied"

        srv = (
            server.with_implementation(ECHO, impl)
            .with_middleware(_recorder("m1", log))
            .with_middleware(deny)
        )
        out = asyncio.run(srv.serve()(make_request("echo", '"hi"')))

        assert out == "denied"
        assert log == ["m2"]
        impl.assert_not_called()
        definition.get_identity.assert_not_called()

    def test_request_transformation_reaches_dispatch(self, server, make_request):
        async def rename(request, next_handler):
            return await next_handler(dataclasses.replace(request, name="echo"))

        srv = server.with_implementation(ECHO, _echo).with_middleware(rename)
        assert asyncio.run(srv.serve()(make_request("alias", '"hi"'))) == '"hi"'

    def test_response_transformation(self, server, make_request):
        async def wrap(request, next_handler):
            return {"body": await next_handler(request)}

        srv = server.with_implementation(ECHO, _echo).with_middleware(wrap)
        assert asyncio.run(srv.serve()(make_request("echo", '"hi"'))) == {"body": '"hi"'}

    def test_with_middlewares_adds_in_order(self, server, make_request):
        log = []
        srv = server.with_implementation(ECHO, _echo).with_middlewares(
            [_recorder("inner", log), _recorder("outer", log)]
        )
        asyncio.run(srv.serve()(make_request("echo", '"hi"')))
        assert log == ["outer:in", "inner:in", "inner:out", "outer:out"]


# ── TimeoutMiddleware ────────────────────────────────────────────────────


@pytest.mark.asyncio
class TestTimeoutMiddleware:
    async def test_slow_call_short_circuits(self, server, make_request):
        async def slow(p, ctx):
            await asyncio.sleep(1)
            return Ok(p)

        mw = TimeoutMiddleware(0.01, on_timeout=lambda req: "timeout")
        handle = server.with_implementation(ECHO, slow).with_middleware(mw).serve()
        assert await handle(make_request("echo", '"hi"')) == "timeout"

    async def test_fast_call_passes_through(self, server, make_request):
        mw = TimeoutMiddleware(5, on_timeout=lambda req: "timeout")
        handle = server.with_implementation(ECHO, _echo).with_middleware(mw).serve()
        assert await handle(make_request("echo", '"hi"')) == '"hi"'

    async def test_inner_timeout_error_propagates(self, server, make_request, caplog):
        async def upstream(p, ctx):
            raise TimeoutError("upstream socket timed out")

        mw = TimeoutMiddleware(30, on_timeout=lambda req: "deadline")
        handle = server.with_implementation(ECHO, upstream).with_middleware(mw).serve()

        with caplog.at_level(logging.WARNING, logger="rpc_dispatch.middleware.timeout"):
            with pytest.raises(TimeoutError, match="upstream socket timed out"):
                await handle(make_request("echo", '"hi"'))

        assert "timed out after" not in caplog.text

    async def test_inner_error_propagates(self, server, make_request):
        async def broken(p, ctx):
            raise ValueError("bad upstream")

        mw = TimeoutMiddleware(30, on_timeout=lambda req: "deadline")
        handle = server.with_implementation(ECHO, broken).with_middleware(mw).serve()
        with pytest.raises(ValueError, match="bad upstream"):
            await handle(make_request("echo", '"hi"'))

    async def test_slow_call_is_cancelled(self, server, make_request):
        cancelled = []

        async def slow(p, ctx):
            try:
                await asyncio.sleep(1)
            except asyncio.CancelledError:
                cancelled.append(True)
                raise
            return Ok(p)

        mw = TimeoutMiddleware(0.01, on_timeout=lambda req: "timeout")
        handle = server.with_implementation(ECHO, slow).with_middleware(mw).serve()
        assert await handle(make_request("echo", '"hi"')) == "timeout"
        assert cancelled == [True]


class TestTimeoutMiddlewareConstruction:
    def test_rejects_non_positive(self):
        with pytest.raises(ValueError):
            TimeoutMiddleware(0, on_timeout=lambda req: None)

    def test_seconds_property(self):
        assert TimeoutMiddleware(2.5, on_timeout=lambda req: None).seconds == 2.5


# ── RecoveryMiddleware ───────────────────────────────────────────────────


class TestRecoveryMiddleware:
    def test_exception_becomes_response(self, server, make_request, caplog):
        def broken_context(request):
            raise RuntimeError("no context")

        mw = RecoveryMiddleware(lambda req, exc: json.dumps({"error": type(exc).__name__}))
        srv = server.with_implementation(ECHO, _echo).with_context(broken_context).with_middleware(mw)

        with caplog.at_level(logging.ERROR, logger="rpc_dispatch.middleware.recovery"):
            out = asyncio.run(srv.serve()(make_request("echo", '"hi"')))

        assert json.loads(out) == {"error": "RuntimeError"}
        assert "Recovery caught RuntimeError" in caplog.text

    def test_passes_through_on_success(self, server, make_request):
        mw = RecoveryMiddleware(lambda req, exc: "fallback")
        srv = server.with_implementation(ECHO, _echo).with_middleware(mw)
        assert asyncio.run(srv.serve()(make_request("echo", '"hi"'))) == '"hi"'

    def test_without_recovery_exception_propagates(self, server, make_request):
        async def explode(p, ctx):
            raise ValueError("kaboom")

        srv = server.with_implementation(ECHO, explode)
        with pytest.raises(ValueError, match="kaboom"):
            asyncio.run(srv.serve()(make_request("echo", '"hi"')))


# ── AccessLogMiddleware ──────────────────────────────────────────────────


class TestAccessLogMiddleware:
    def test_logs_completion(self, caplog):
        mw = AccessLogMiddleware(describe=lambda req: f"<{req}>")
        handler = AsyncMock(return_value="ok")

        with caplog.at_level(logging.DEBUG, logger="rpc_dispatch.access"):
            assert asyncio.run(mw("req", handler)) == "ok"

        messages = [r.getMessage() for r in caplog.records]
        assert messages[0] == "REQUEST  <req>"
        assert messages[1].startswith("RESPONSE <req> elapsed_ms=")
        assert caplog.records[1].levelno == logging.INFO

    def test_slow_call_warns(self, caplog):
        async def slow(req):
            await asyncio.sleep(0.02)
            return "ok"

        mw = AccessLogMiddleware(slow_call_ms=1)
        with caplog.at_level(logging.INFO, logger="rpc_dispatch.access"):
            asyncio.run(mw("req", slow))

        assert caplog.records[-1].levelno == logging.WARNING
        assert caplog.records[-1].getMessage().startswith("SLOW")

    def test_logs_even_when_handler_raises(self, caplog):
        handler = AsyncMock(side_effect=RuntimeError("x"))
        mw = AccessLogMiddleware()
        with caplog.at_level(logging.INFO, logger="rpc_dispatch.access"):
            with pytest.raises(RuntimeError):
                asyncio.run(mw("req", handler))
        assert any(r.getMessage().startswith("RESPONSE") for r in caplog.records)
