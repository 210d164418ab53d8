"""
Request builders. Every function here is pure: it only assembles an
httpx.Request, nothing is sent.
"""
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode

import httpx
from pydantic_core import to_json

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

FormParams = Union[Mapping[str, Optional[str]], Iterable[Tuple[str, Optional[str]]]]


def _headers(content_type: Optional[str], headers: Optional[Dict[str, str]]) -> httpx.Headers:
    """Body content type first, caller headers replace it when they name it too."""
    merged = httpx.Headers()
    if content_type:
        merged["Content-Type"] = content_type
    if headers:
        for name, value in headers.items():
            merged[name] = value
    return merged


def _form_pairs(params: Optional[FormParams]):
    if params is None:
        return []
    items = params.items() if isinstance(params, Mapping) else params
    return [(key, value) for key, value in items if value is not None]


def _to_json(payload: Any) -> bytes:
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return to_json(payload)


def build_form(url: str, headers: Optional[Dict[str, str]] = None,
               params: Optional[FormParams] = None) -> httpx.Request:
    """POST with a form-urlencoded body.

    ``params`` is either a mapping or an iterable of ``(key, value)`` pairs.
    Pairs keep their order (and duplicates) in the body. Entries whose value
    is None are left out.
    """
    body = urlencode(_form_pairs(params))
    return httpx.Request(
        "POST",
        url,
        headers=_headers(FORM_CONTENT_TYPE, headers),
        content=body.encode("utf-8"),
    )


def build_json(url: str, headers: Optional[Dict[str, str]] = None,
               payload: Any = None) -> httpx.Request:
    """POST with a JSON body. A str payload is taken as already-serialized JSON."""
    return httpx.Request(
        "POST",
        url,
        headers=_headers(JSON_CONTENT_TYPE, headers),
        content=_to_json(payload),
    )


def build_raw(url: str, headers: Optional[Dict[str, str]] = None, text: str = "") -> httpx.Request:
    """POST with a plain text body."""
    return httpx.Request(
        "POST",
        url,
        headers=_headers(TEXT_CONTENT_TYPE, headers),
        content=text.encode("utf-8"),
    )


def build_get(url: str, headers: Optional[Dict[str, str]] = None,
              params: Optional[Mapping[str, Any]] = None) -> httpx.Request:
    """GET with ``params`` merged into the query string already in ``url``."""
    target = httpx.URL(url)
    if params is not None:
        target = target.copy_merge_params(dict(params))
    return httpx.Request("GET", target, headers=_headers(None, headers))
