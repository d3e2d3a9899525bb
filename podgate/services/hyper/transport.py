"""Transports for the hyperd daemon API.

The daemon speaks HTTP over a local Unix domain socket. ``DaemonTransport``
is the only code that knows the socket path and the framing; it maps
transport failures onto the gateway's daemon error types and performs no
retries. ``NullTransport`` is selected instead when dry-run mode is on.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, Optional

import httpx
import structlog

from ...config.hyper import HyperConfig
from ...models.errors import (
    DaemonProtocolError,
    DaemonTimeout,
    DaemonUnreachable,
    StreamError,
)

logger = structlog.get_logger(__name__)

# The daemon ignores the host; httpx needs one to build URLs.
DAEMON_BASE_URL = "http://hyper"

# Longest slice of an error body copied into exception messages
_MAX_ERROR_BODY = 200


class LogStream:
    """Byte stream opened against the daemon.

    Iterate it with ``async for`` to receive chunks as the daemon sends them.
    The connection is released when the daemon closes it, when iteration
    fails, or when the consumer calls ``aclose()``. I/O failures surface to
    the consumer as ``StreamError``.
    """

    def __init__(self, response: Optional[httpx.Response] = None, path: str = ""):
        self._response = response
        self.path = path
        self._closed = response is None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def status_code(self) -> Optional[int]:
        return self._response.status_code if self._response is not None else None

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.iter_bytes()

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """Yield raw chunks until the daemon closes the stream."""
        if self._response is None or self._closed:
            return

        try:
            async for chunk in self._response.aiter_bytes():
                if chunk:
                    yield chunk
        except (httpx.TransportError, httpx.StreamError) as exc:
            # A stream closed by its consumer ends quietly
            if self._closed:
                return
            logger.warning("Daemon stream dropped", path=self.path, error=str(exc))
            raise StreamError(
                f"Stream from hyperd {self.path} failed: {exc}",
                operation=f"GET {self.path}",
            ) from exc
        finally:
            await self.aclose()

    async def read(self) -> bytes:
        """Collect the whole stream."""
        return b"".join([chunk async for chunk in self.iter_bytes()])

    async def aclose(self) -> None:
        """Terminate the underlying connection."""
        if self._closed:
            return
        self._closed = True
        if self._response is not None:
            await self._response.aclose()

    async def __aenter__(self) -> "LogStream":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


class Transport(ABC):
    """Request/response and streaming access to the daemon."""

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        timeout: Optional[float] = None,
        parse: bool = True,
    ) -> Any:
        """Perform a request and return the parsed response body."""
        pass

    @abstractmethod
    async def open_stream(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        tail: bool = False,
    ) -> LogStream:
        """Open a GET stream, returning once response headers arrive."""
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Release any held connections."""
        pass


class DaemonTransport(Transport):
    """HTTP over the hyperd Unix domain socket, backed by httpx."""

    def __init__(
        self,
        socket_path: str,
        request_timeout: float = 30.0,
        connect_timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the transport.

        Args:
            socket_path: Path of the daemon's Unix domain socket
            request_timeout: Default per-call timeout in seconds
            connect_timeout: Timeout for dialing the socket
            transport: Replacement httpx transport (tests use httpx.MockTransport)
        """
        self.socket_path = socket_path
        self.request_timeout = request_timeout
        self.connect_timeout = connect_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the pooled HTTP client bound to the socket."""
        if self._client is None or self._client.is_closed:
            transport = self._transport or httpx.AsyncHTTPTransport(uds=self.socket_path)
            self._client = httpx.AsyncClient(
                transport=transport,
                base_url=DAEMON_BASE_URL,
                timeout=self._timeout(self.request_timeout),
            )
        return self._client

    def _timeout(self, seconds: Optional[float], read: Any = ...) -> httpx.Timeout:
        seconds = self.request_timeout if seconds is None else seconds
        if read is ...:
            return httpx.Timeout(seconds, connect=self.connect_timeout)
        return httpx.Timeout(seconds, connect=self.connect_timeout, read=read)

    def _transport_error(self, exc: Exception, method: str, path: str) -> DaemonUnreachable:
        operation = f"{method} {path}"
        if isinstance(exc, httpx.TimeoutException):
            return DaemonTimeout(f"hyperd did not answer {operation} in time", operation=operation)
        return DaemonUnreachable(
            f"Could not reach hyperd at {self.socket_path}: {exc}",
            operation=operation,
        )

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        timeout: Optional[float] = None,
        parse: bool = True,
    ) -> Any:
        """Perform a request over the socket.

        Args:
            method: HTTP method
            path: Daemon API path
            params: Query parameters
            json: JSON request body
            timeout: Per-call timeout in seconds (defaults to request_timeout)
            parse: Decode the body as JSON; otherwise return it as text

        Returns:
            Parsed JSON body, None for an empty body, or text when parse=False.

        Raises:
            DaemonUnreachable: socket could not be dialed or connection dropped
            DaemonTimeout: no answer within the timeout
            DaemonProtocolError: error status or unparseable body
        """
        client = self._get_client()
        try:
            response = await client.request(
                method,
                path,
                params=params,
                json=json,
                timeout=self._timeout(timeout),
            )
        except httpx.TransportError as exc:
            raise self._transport_error(exc, method, path) from exc

        operation = f"{method} {path}"
        if response.is_error:
            raise DaemonProtocolError(
                f"hyperd returned HTTP {response.status_code} for {operation}: "
                f"{response.text[:_MAX_ERROR_BODY]}",
                operation=operation,
                http_status=response.status_code,
            )

        if not parse:
            return response.text
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise DaemonProtocolError(
                f"hyperd returned a non-JSON body for {operation}",
                operation=operation,
                http_status=response.status_code,
            ) from exc

    async def open_stream(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        tail: bool = False,
    ) -> LogStream:
        """Open a streaming GET.

        Args:
            path: Daemon API path
            params: Query parameters
            tail: Disable the read timeout so an idle, followed stream stays open

        Returns:
            LogStream yielding the response body lazily.
        """
        client = self._get_client()
        timeout = self._timeout(None, read=None) if tail else self._timeout(None)
        request = client.build_request("GET", path, params=params, timeout=timeout)
        try:
            response = await client.send(request, stream=True)
        except httpx.TransportError as exc:
            raise self._transport_error(exc, "GET", path) from exc

        if response.is_error:
            try:
                body = await response.aread()
            except httpx.TransportError:
                body = b""
            finally:
                await response.aclose()
            raise DaemonProtocolError(
                f"hyperd returned HTTP {response.status_code} for GET {path}: "
                f"{body[:_MAX_ERROR_BODY].decode('utf-8', 'replace')}",
                operation=f"GET {path}",
                http_status=response.status_code,
            )

        return LogStream(response, path=path)

    async def aclose(self) -> None:
        """Close the pooled client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _dry_run_pod_info(pod_name: str) -> Dict[str, Any]:
    """PodInfo body answered in dry-run mode; dry-run pods have a blank address."""
    return {
        "podID": pod_name,
        "podName": pod_name,
        "kind": "Pod",
        "apiVersion": "v1",
        "vm": "",
        "createdAt": 0,
        "status": {
            "phase": "running",
            "hostIP": "",
            "podIP": [""],
            "containerStatus": [],
        },
    }


class NullTransport(Transport):
    """Dry-run transport: never touches a socket and reports success."""

    socket_path = None

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        timeout: Optional[float] = None,
        parse: bool = True,
    ) -> Any:
        logger.debug("Skipping daemon call in dry-run mode", method=method, path=path)
        if path == "/pod/info":
            return _dry_run_pod_info((params or {}).get("podName", ""))
        if not parse:
            return ""
        return {"Code": 0}

    async def open_stream(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        tail: bool = False,
    ) -> LogStream:
        logger.debug("Skipping daemon stream in dry-run mode", path=path)
        return LogStream(None, path=path)

    async def aclose(self) -> None:
        pass


def create_transport(config: HyperConfig) -> Transport:
    """Select the transport for a client configuration."""
    if config.noop:
        logger.info("hyperd dry-run mode enabled, daemon calls are skipped")
        return NullTransport()
    return DaemonTransport(
        config.socket_path,
        request_timeout=config.request_timeout,
        connect_timeout=config.connect_timeout,
    )
