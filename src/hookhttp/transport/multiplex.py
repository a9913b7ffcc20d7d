"""Multiplexing handle backed by aiohttp on a private event loop."""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Optional, Union

import aiohttp

from ..errors import TransportFailure
from ..models.config import TransportOptions
from ..models.message import Request
from .protocols import Completion, RawExchange
from .raw import Hop, render_exchange, request_headers, request_payload

logger = logging.getLogger(__name__)


def failure_from_aiohttp(exc: BaseException) -> TransportFailure:
    """Map an aiohttp (or asyncio timeout) exception to a TransportFailure code."""
    # Order matters: the SSL and timeout errors are connection error subclasses
    if isinstance(exc, aiohttp.TooManyRedirects):
        code = "too_many_redirects"
    elif isinstance(exc, (aiohttp.ClientSSLError, aiohttp.ServerFingerprintMismatch)):
        code = "tls_error"
    elif isinstance(exc, (aiohttp.ServerTimeoutError, asyncio.TimeoutError)):
        code = "timeout"
    elif isinstance(exc, aiohttp.ClientConnectionError):
        code = "connect_error"
    elif isinstance(exc, (aiohttp.InvalidURL, ValueError)):
        code = "invalid_request"
    else:
        code = "request_error"
    message = str(exc) or exc.__class__.__name__
    return TransportFailure(code, message)


def client_timeout(options: TransportOptions) -> aiohttp.ClientTimeout:
    """Apply the timeout to connecting and to each socket read, like requests does."""
    return aiohttp.ClientTimeout(total=None, sock_connect=options.timeout, sock_read=options.timeout)


def _hop_from_response(response: aiohttp.ClientResponse) -> Hop:
    return Hop(
        status=response.status,
        reason=response.reason or "",
        headers=list(response.raw_headers),
        version=f"HTTP/{response.version.major}.{response.version.minor}",
    )


class AiohttpMultiplex:
    """
    MultiplexHandle running aiohttp exchanges on its own event loop.

    The loop never runs on its own: it only advances inside ``step()`` and
    ``select()``, so every exchange is driven from the caller's thread.
    Must not be used from inside a running asyncio event loop.

    Example:
        handle = AiohttpMultiplex()
        tid = handle.add(Request("GET", "https://example.com"), TransportOptions())
        done, running = handle.step()
        while running:
            handle.select()
            done, running = handle.step()
        handle.close()
    """

    def __init__(self, limit: int = 100, limit_per_host: int = 10, trust_env: bool = False) -> None:
        """
        Initialize the handle.

        Args:
            limit: Total connection limit of the shared connector
            limit_per_host: Per-host connection limit
            trust_env: Read proxy settings from the environment
        """
        self._limit = limit
        self._trust_env = trust_env
        self._limit_per_host = limit_per_host
        self._loop = asyncio.new_event_loop()
        self._session: Optional[aiohttp.ClientSession] = None
        self._tasks: dict[int, asyncio.Task] = {}
        self._ids = itertools.count(1)

    async def _get_session(self) -> aiohttp.ClientSession:
        """Create the client session on first use, inside the private loop."""
        if self._session is None:
            connector = aiohttp.TCPConnector(
                limit=self._limit,
                limit_per_host=self._limit_per_host,
                ttl_dns_cache=300,
            )
            # Bodies stay as sent; content codings are left to the caller
            self._session = aiohttp.ClientSession(
                connector=connector,
                trust_env=self._trust_env,
                auto_decompress=False,
            )
        return self._session

    async def _exchange(
        self,
        request: Request,
        options: TransportOptions,
    ) -> Union[RawExchange, TransportFailure]:
        session = await self._get_session()
        try:
            async with session.request(
                request.method,
                request.url,
                headers=request_headers(request),
                data=request_payload(request),
                allow_redirects=options.follow_redirects,
                max_redirects=options.max_redirects,
                timeout=client_timeout(options),
                ssl=options.verify_tls,
                **options.extra,
            ) as response:
                body = await response.read()
                hops = [_hop_from_response(hop) for hop in response.history]
                hops.append(_hop_from_response(response))
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            failure = failure_from_aiohttp(e)
            logger.debug(f"{request.method} {request.url} failed: {failure}")
            return failure
        except Exception as e:
            # aiohttp rejects some payloads (e.g. non-IOBase readers) with TypeError
            failure = TransportFailure("request_error", f"{e.__class__.__name__}: {e}")
            logger.warning(f"{request.method} {request.url} failed: {failure}")
            return failure
        return render_exchange(hops, body)

    def add(self, request: Request, options: TransportOptions) -> int:
        """Schedule an exchange on the private loop and return its transport id."""
        transport_id = next(self._ids)
        self._tasks[transport_id] = self._loop.create_task(self._exchange(request, options))
        logger.debug(f"Added {request.method} {request.url} as transport id {transport_id}")
        return transport_id

    def step(self) -> tuple[list[Completion], bool]:
        """Run the ready work of the loop once and collect finished exchanges."""
        if self._tasks:
            self._loop.run_until_complete(asyncio.sleep(0))

        completions = []
        for transport_id, task in list(self._tasks.items()):
            if not task.done():
                continue
            del self._tasks[transport_id]
            if task.cancelled():
                result = TransportFailure("request_error", "exchange was cancelled")
            else:
                result = task.result()
            if isinstance(result, TransportFailure):
                completions.append(Completion(transport_id, failure=result))
            else:
                completions.append(Completion(transport_id, exchange=result))
        return completions, bool(self._tasks)

    def select(self, timeout: Optional[float] = None) -> None:
        """Block until at least one exchange finishes or ``timeout`` expires."""
        pending = [task for task in self._tasks.values() if not task.done()]
        if not pending:
            return
        self._loop.run_until_complete(
            asyncio.wait(pending, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        )

    def close(self) -> None:
        """Abandon unfinished exchanges, close the session and the loop."""
        if self._loop.is_closed():
            return
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            self._loop.run_until_complete(asyncio.gather(*tasks, return_exceptions=True))
        self._tasks.clear()
        if self._session is not None:
            self._loop.run_until_complete(self._session.close())
            self._session = None
        self._loop.run_until_complete(self._loop.shutdown_asyncgens())
        self._loop.close()
