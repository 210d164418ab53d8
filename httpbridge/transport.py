"""
One blocking round trip over a shared httpx.Client. Failures come back as
values on the Exchange instead of exceptions.
"""
import time

import httpx
import structlog

logger = structlog.get_logger(__name__)


class Exchange:
    def __init__(
        self,
        status_code: int = 0,
        content: bytes = b'',
        elapsed: float = 0.0,
        error: str = None,
        encoding: str = None,
    ):
        """Hold what came back from one request, or why nothing did."""
        self.status_code = status_code
        self.content = content
        self.elapsed = elapsed
        self.error = error
        self.encoding = encoding

    @property
    def failed(self) -> bool:
        """True when no HTTP response was obtained."""
        return self.error is not None

    @property
    def success(self) -> bool:
        """Check if a response arrived with a 2xx status code."""
        return self.error is None and 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        """Decode the body using the response charset, falling back to utf-8."""
        if not self.content:
            return ""
        try:
            return self.content.decode(self.encoding or 'utf-8')
        except (UnicodeDecodeError, LookupError):
            return self.content.decode('utf-8', errors='replace')


def send(client: httpx.Client, request: httpx.Request, read_body: str = "always") -> Exchange:
    """Send ``request`` and capture the outcome.

    ``read_body`` is ``"always"``, ``"on_success"`` (skip the body of non-2xx
    responses) or ``"never"``.
    """
    url = str(request.url)
    start_time = time.monotonic()
    try:
        response = client.send(request, stream=True)
        try:
            wants_body = read_body == "always" or (read_body == "on_success" and response.is_success)
            content = response.read() if wants_body else b''
        finally:
            response.close()

        exchange = Exchange(
            status_code=response.status_code,
            content=content,
            elapsed=time.monotonic() - start_time,
            encoding=response.charset_encoding,
        )
        logger.debug("request_completed",
                     method=request.method,
                     url=url,
                     status_code=exchange.status_code,
                     elapsed=round(exchange.elapsed, 4))
        return exchange

    except httpx.TimeoutException as e:
        error = f"Timeout: {e!r}"
        logger.warning("request_timeout", method=request.method, url=url, error=str(e))

    except httpx.TransportError as e:
        error = f"Transport error: {e!r}"
        logger.warning("transport_error", method=request.method, url=url, error=str(e))

    except Exception as e:
        error = f"Unexpected error: {e!r}"
        logger.error("request_failed",
                     method=request.method,
                     url=url,
                     error=str(e),
                     exc_info=True)

    return Exchange(elapsed=time.monotonic() - start_time, error=error)
