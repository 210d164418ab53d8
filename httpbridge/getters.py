"""
Extractors: plain callables that know one API's envelope convention.

Any function with the right shape works; the factories below cover the
common `{success, code, msg, data}` layouts.
"""
from typing import Any, Callable, Dict, Optional

Envelope = Dict[str, Any]

SuccessGetter = Callable[[Envelope], bool]
CodeGetter = Callable[[Envelope], Optional[str]]
MsgGetter = Callable[[Envelope], Optional[str]]
DataGetter = Callable[[Envelope], Any]


def flag(field: str = "success") -> SuccessGetter:
    """Success when ``field`` is truthy."""
    def getter(envelope: Envelope) -> bool:
        return bool(envelope.get(field))
    return getter


def equals(field: str, expected: Any) -> SuccessGetter:
    """Success when ``field`` matches ``expected``; both sides compared as strings."""
    expected_text = str(expected)

    def getter(envelope: Envelope) -> bool:
        value = envelope.get(field)
        return value is not None and str(value) == expected_text
    return getter


def text(field: str) -> MsgGetter:
    def getter(envelope: Envelope) -> Optional[str]:
        value = envelope.get(field)
        return None if value is None else str(value)
    return getter


def member(*path: str) -> DataGetter:
    """Nested lookup, e.g. ``member("data", "items")``. None when a hop is missing."""
    def getter(envelope: Envelope) -> Any:
        current: Any = envelope
        for key in path:
            if not isinstance(current, dict) or key not in current:
                return None
            current = current[key]
        return current
    return getter
