"""Tests for the asynchronous dispatch path."""

from conftest import FakeTransport, make_exchange
from hookhttp import Client, ClientConfig, Request, TransportFailure
from hookhttp.engine.dispatcher import AsyncDispatcher
from hookhttp.models import OutcomeKind


def _dispatcher(results):
    transport = FakeTransport(results=results)
    return AsyncDispatcher(transport, ClientConfig()), transport


class TestAsyncDispatcher:
    """Tests for AsyncDispatcher."""

    def test_every_request_calls_back_once(self):
        """Test K dispatches produce exactly K callbacks."""
        results = {
            "https://a.example/": (make_exchange(200, body=b"a"), 2),
            "https://b.example/": (make_exchange(404), 3),
            "https://c.example/": (TransportFailure("timeout", "timed out"), 4),
            "https://d.example/": (make_exchange(201, body=b"d"), 5),
        }
        dispatcher, _ = _dispatcher(results)
        successes, errors = [], []

        for url in results:
            dispatcher.dispatch(
                Request("GET", url),
                on_success=successes.append,
                on_error=lambda outcome, request: errors.append((outcome, request)),
            )
        dispatcher.wait()

        assert sorted(r.body for r in successes) == [b"a", b"d"]
        assert len(errors) == 2
        assert len(successes) + len(errors) == len(results)
        assert dispatcher.pending_count == 0

    def test_error_callback_receives_outcome_and_request(self):
        """Test error details for HTTP and transport failures."""
        results = {
            "https://missing.example/": (make_exchange(404, reason="Not Found"), 1),
            "https://down.example/": (TransportFailure("connect_error", "refused"), 1),
        }
        dispatcher, _ = _dispatcher(results)
        errors = {}

        for url in results:
            dispatcher.dispatch(
                Request("GET", url),
                on_error=lambda outcome, request: errors.__setitem__(request.url, outcome),
            )

        missing = errors["https://missing.example/"]
        assert missing.kind is OutcomeKind.HTTP_ERROR
        assert missing.status_code == 404

        down = errors["https://down.example/"]
        assert down.kind is OutcomeKind.TRANSPORT_ERROR
        assert down.error_code == "connect_error"

    def test_fast_request_completes_during_dispatch(self):
        """Test that dispatch runs one poll cycle immediately."""
        dispatcher, transport = _dispatcher({"https://fast.example/": (make_exchange(200), 1)})
        successes = []

        dispatcher.dispatch(Request("GET", "https://fast.example/"), on_success=successes.append)

        assert len(successes) == 1
        assert dispatcher.pending_count == 0
        assert transport.multiplexes[0].step_calls == 1

    def test_poll_reports_pending(self):
        """Test poll's return value as requests finish."""
        dispatcher, _ = _dispatcher({"https://slow.example/": (make_exchange(200), 3)})
        done = []

        dispatcher.dispatch(Request("GET", "https://slow.example/"), on_success=done.append)

        assert dispatcher.poll() is True
        assert done == []
        assert dispatcher.poll() is False
        assert len(done) == 1

    def test_poll_with_nothing_pending(self):
        """Test that poll is a no-op before any dispatch."""
        dispatcher, transport = _dispatcher({})

        assert dispatcher.poll() is False
        assert transport.multiplexes == []

    def test_handle_created_once(self):
        """Test that the multiplexing handle is reused."""
        results = {
            "https://a.example/": (make_exchange(200), 1),
            "https://b.example/": (make_exchange(200), 1),
        }
        dispatcher, transport = _dispatcher(results)

        dispatcher.dispatch(Request("GET", "https://a.example/"))
        dispatcher.dispatch(Request("GET", "https://b.example/"))

        assert len(transport.multiplexes) == 1

    def test_missing_callbacks_are_skipped(self):
        """Test dispatching without callbacks."""
        results = {
            "https://ok.example/": (make_exchange(200), 2),
            "https://bad.example/": (make_exchange(500), 2),
        }
        dispatcher, _ = _dispatcher(results)

        dispatcher.dispatch(Request("GET", "https://ok.example/"))
        dispatcher.dispatch(Request("GET", "https://bad.example/"))
        dispatcher.wait()

        assert dispatcher.pending_count == 0

    def test_wait_blocks_on_select(self):
        """Test that wait alternates readiness waits and polls."""
        dispatcher, transport = _dispatcher({"https://slow.example/": (make_exchange(200), 4)})

        dispatcher.dispatch(Request("GET", "https://slow.example/"))
        dispatcher.wait()

        handle = transport.multiplexes[0]
        assert handle.select_calls == 3
        assert handle.step_calls == 4

    def test_wait_with_nothing_pending_returns(self):
        """Test wait before any dispatch."""
        dispatcher, transport = _dispatcher({})
        dispatcher.wait()
        assert transport.multiplexes == []

    def test_close(self):
        """Test closing the handle."""
        dispatcher, transport = _dispatcher({"https://slow.example/": (make_exchange(200), 5)})
        dispatcher.dispatch(Request("GET", "https://slow.example/"))

        dispatcher.close()

        assert transport.multiplexes[0].closed is True
        assert dispatcher.pending_count == 0


class TestClientAsync:
    """Tests for the client's async surface."""

    def test_send_async_ignores_escalation(self):
        """Test that HTTP errors never raise from the async path."""
        transport = FakeTransport(results={"https://x.example/": (make_exchange(500), 2)})
        client = Client(ClientConfig(throw_http_errors=True), transport=transport)
        errors = []

        client.send_async(Request("GET", "https://x.example/"), on_error=lambda o, r: errors.append(o))
        client.wait()

        assert [o.status_code for o in errors] == [500]

    def test_poll_through_client(self):
        """Test polling from the client facade."""
        transport = FakeTransport(results={"https://x.example/": (make_exchange(200), 2)})
        client = Client(transport=transport)
        done = []

        client.send_async(Request("GET", "https://x.example/"), on_success=done.append)
        assert client.poll() is False
        assert len(done) == 1
