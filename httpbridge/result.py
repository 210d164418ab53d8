"""
Typed outcome of one bridged call
"""
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

# Opaque message handed to callers for every unexpected failure.
SYSTEM_BUSY = "system busy"


class FailureKind(str, Enum):
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    DECODE = "decode"
    EXTRACTOR = "extractor"


class Result(BaseModel, Generic[T]):
    """Outcome of ``BridgeClient.execute``.

    ``data`` is set only for successful envelopes and ``msg`` only for failed
    ones, as long as the extractors follow that convention. ``status_code``
    and ``failure`` are diagnostics; callers that only look at the envelope
    fields can ignore them.
    """
    success: bool = False
    code: Optional[str] = None
    msg: Optional[str] = None
    data: Optional[T] = None
    status_code: Optional[int] = None
    failure: Optional[FailureKind] = None

    @classmethod
    def busy(cls, failure: FailureKind, status_code: Optional[int] = None) -> "Result":
        return cls(success=False, msg=SYSTEM_BUSY, failure=failure, status_code=status_code)
