"""Shared fixtures: scripted fake transports and a local aiohttp server."""

import asyncio
import gzip
import socket
import threading
from typing import Optional, Union

import pytest
from aiohttp import web
from hookhttp.errors import TransportFailure
from hookhttp.transport.protocols import Completion, RawExchange
from hookhttp.transport.raw import Hop, render_exchange

Scripted = Union[RawExchange, TransportFailure]

GZIPPED_BODY = gzip.compress(b"zipped", mtime=0)


def make_exchange(
    status: int = 200,
    headers: Optional[dict] = None,
    body: bytes = b"",
    reason: str = "OK",
) -> RawExchange:
    """Build a single-hop raw exchange."""
    return render_exchange([Hop(status, reason, list((headers or {}).items()))], body)


class FakeSession:
    """TransportSession replaying a script; the last item repeats forever."""

    def __init__(self, script: list[Scripted]):
        self.script = list(script)
        self.calls: list = []
        self.sent_bodies: list = []
        self.closed = False

    def execute(self, request, options):
        self.calls.append((request, options))
        body = request.body
        self.sent_bodies.append(body.read() if request.is_streaming else body)
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, TransportFailure):
            raise item
        return item

    def close(self):
        self.closed = True


class FakeMultiplex:
    """
    MultiplexHandle completing each exchange after a number of steps.

    ``results`` maps URL -> (result, steps); a request finishes on its
    ``steps``-th call to step().
    """

    def __init__(self, results: dict):
        self.results = results
        self.running: dict[int, list] = {}
        self.next_id = 1
        self.step_calls = 0
        self.select_calls = 0
        self.closed = False

    def add(self, request, options):
        result, steps = self.results[request.url]
        transport_id = self.next_id
        self.next_id += 1
        self.running[transport_id] = [result, steps]
        return transport_id

    def step(self):
        self.step_calls += 1
        completions = []
        for transport_id, entry in list(self.running.items()):
            entry[1] -= 1
            if entry[1] <= 0:
                del self.running[transport_id]
                result = entry[0]
                if isinstance(result, TransportFailure):
                    completions.append(Completion(transport_id, failure=result))
                else:
                    completions.append(Completion(transport_id, exchange=result))
        return completions, bool(self.running)

    def select(self, timeout=None):
        self.select_calls += 1

    def close(self):
        self.closed = True


class FakeTransport:
    """Transport handing out one FakeSession and FakeMultiplex handles."""

    def __init__(self, script: Optional[list[Scripted]] = None, results: Optional[dict] = None):
        self.session = FakeSession(script or [make_exchange()])
        self.results = results or {}
        self.multiplexes: list[FakeMultiplex] = []
        self.sessions_opened = 0

    def open_session(self):
        self.sessions_opened += 1
        return self.session

    def open_multiplex(self):
        handle = FakeMultiplex(self.results)
        self.multiplexes.append(handle)
        return handle


async def _ok(request):
    return web.Response(text="hello", headers={"X-Hop": "final"})


async def _redirect(request):
    raise web.HTTPFound("/ok", headers={"X-Hop": "redirect"})


async def _missing(request):
    return web.Response(status=404, text="nope")


async def _echo(request):
    data = await request.read()
    return web.Response(body=data, headers={"X-Method": request.method})


async def _gzipped(request):
    return web.Response(body=GZIPPED_BODY, headers={"Content-Encoding": "gzip"})


async def _loop(request):
    raise web.HTTPFound("/loop")


def _build_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/ok", _ok)
    app.router.add_get("/redirect", _redirect)
    app.router.add_get("/missing", _missing)
    app.router.add_get("/loop", _loop)
    app.router.add_get("/gzip", _gzipped)
    app.router.add_route("*", "/echo", _echo)
    return app


@pytest.fixture(scope="module")
def live_server():
    """Serve a small aiohttp app from a background thread and yield its base URL."""
    loop = asyncio.new_event_loop()
    runner = web.AppRunner(_build_app())
    loop.run_until_complete(runner.setup())
    site = web.TCPSite(runner, "127.0.0.1", 0)
    loop.run_until_complete(site.start())
    port = runner.addresses[0][1]

    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()

    yield f"http://127.0.0.1:{port}"

    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=5)
    loop.run_until_complete(runner.cleanup())
    loop.close()


@pytest.fixture
def closed_port_url():
    """URL of a local port with nothing listening."""
    sock = socket.socket()
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}/"
