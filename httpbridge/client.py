"""
BridgeClient: runs prebuilt requests over one pooled httpx.Client and maps the
JSON envelope of the response onto a Result.

Build one per process and hand it to every call site; each instance owns its
own connection pool.
"""
from typing import Any, Callable, Dict, Optional

import httpx
import structlog
from pydantic import ValidationError

from .config import Config
from .envelope import EnvelopeError, decode_data, parse_envelope, read_code, without_code
from .getters import CodeGetter, DataGetter, MsgGetter, SuccessGetter
from .result import FailureKind, Result
from .transport import Exchange, send

logger = structlog.get_logger(__name__)


class BridgeClient:
    def __init__(self, config: Config = None, transport: httpx.BaseTransport = None):
        """Create the shared client from the ``client`` section of the config."""
        self.config = config or Config()
        settings = self.config.client

        self.timeout = httpx.Timeout(
            connect=settings.get('connect_timeout', 5),
            read=settings.get('read_timeout', 5),
            write=settings.get('write_timeout', 5),
            pool=settings.get('pool_timeout', 5),
        )
        self.limits = httpx.Limits(
            max_connections=settings.get('max_connections', 2000),
            max_keepalive_connections=settings.get('max_keepalive_connections', 2000),
            keepalive_expiry=settings.get('keepalive_expiry', 50),
        )
        self._client = httpx.Client(
            timeout=self.timeout,
            limits=self.limits,
            follow_redirects=settings.get('follow_redirects', True),
            max_redirects=settings.get('max_redirects', 20),
            transport=transport,
        )

    def close(self):
        self._client.close()

    def __enter__(self) -> "BridgeClient":
        return self

    def __exit__(self, *exc_info):
        self.close()

    def execute(
        self,
        request: httpx.Request,
        success_getter: SuccessGetter,
        msg_getter: MsgGetter,
        data_getter: DataGetter,
        target_type: Any,
        code_getter: Optional[CodeGetter] = None,
    ) -> Result:
        """Send ``request`` and decode its envelope.

        ``data_getter`` picks the payload out of a successful envelope and the
        payload is validated into ``target_type``. ``code_getter`` defaults to
        reading the top-level ``code`` field. Never raises: failures come back
        as ``Result(success=False)``, with ``msg`` set to ``SYSTEM_BUSY``
        unless the server answered with a non-2xx status.
        """
        return self._execute(request, success_getter, msg_getter, data_getter,
                             target_type, code_getter)

    def execute_object(
        self,
        request: httpx.Request,
        success_getter: SuccessGetter,
        msg_getter: MsgGetter,
        target_type: Any,
    ) -> Result:
        """Like ``execute``, but the whole envelope minus ``code`` is the payload."""
        return self._execute(request, success_getter, msg_getter, without_code, target_type)

    def execute_raw(self, request: httpx.Request) -> Optional[str]:
        """Return the response body as text, whatever the status; None on failure."""
        exchange = send(self._client, request, read_body="always")
        if exchange.failed:
            return None
        return exchange.text

    def execute_for_status_code(self, request: httpx.Request) -> int:
        """Return the HTTP status code, or -1 when no response was received."""
        exchange = send(self._client, request, read_body="never")
        if exchange.failed:
            return -1
        return exchange.status_code

    def _execute(
        self,
        request: httpx.Request,
        success_getter: SuccessGetter,
        msg_getter: MsgGetter,
        data_getter: Callable[[Dict[str, Any]], Any],
        target_type: Any,
        code_getter: Optional[CodeGetter] = None,
    ) -> Result:
        log = logger.bind(method=request.method, url=str(request.url))
        try:
            exchange = send(self._client, request, read_body="on_success")
            if exchange.failed:
                return Result.busy(FailureKind.TRANSPORT)

            if not exchange.success:
                # The body of a non-2xx response is dropped unread.
                log.warning("unsuccessful_status", status_code=exchange.status_code)
                return Result(success=False,
                              status_code=exchange.status_code,
                              failure=FailureKind.HTTP_STATUS)

            return self._decode(exchange, success_getter, msg_getter, data_getter,
                                target_type, code_getter, log)

        except Exception as e:
            log.error("execute_failed", error=str(e), exc_info=True)
            return Result.busy(FailureKind.TRANSPORT)

    def _decode(
        self,
        exchange: Exchange,
        success_getter: SuccessGetter,
        msg_getter: MsgGetter,
        data_getter: Callable[[Dict[str, Any]], Any],
        target_type: Any,
        code_getter: Optional[CodeGetter],
        log,
    ) -> Result:
        try:
            envelope = parse_envelope(exchange.text)
            success = bool(success_getter(envelope))
            code = code_getter(envelope) if code_getter is not None else read_code(envelope)

            if success:
                data = decode_data(data_getter(envelope), target_type)
                return Result(success=True, code=code, data=data,
                              status_code=exchange.status_code)

            return Result(success=False, code=code, msg=msg_getter(envelope),
                          status_code=exchange.status_code)

        except (EnvelopeError, ValidationError) as e:
            log.error("envelope_decode_failed",
                      status_code=exchange.status_code,
                      error=str(e))
            return Result.busy(FailureKind.DECODE, status_code=exchange.status_code)

        except Exception as e:
            log.error("extractor_failed",
                      status_code=exchange.status_code,
                      error=str(e),
                      exc_info=True)
            return Result.busy(FailureKind.EXTRACTOR, status_code=exchange.status_code)
