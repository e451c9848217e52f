"""
Single-attempt upstream HTTP access.

One request per call, a fixed timeout from settings, no retries. Transport
failures and non-200 responses become typed errors so callers can tell
"try again later" apart from "no drawing for this date".
"""

import gzip
import json
import time
import zlib
from typing import Any, Dict, Optional

import requests
from loguru import logger

from .config import get_settings
from .errors import MalformedPayloadError, UpstreamStatusError, UpstreamUnreachableError

GZIP_MAGIC = b"\x1f\x8b"

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}


def decode_body(content: bytes, content_encoding: Optional[str] = None) -> str:
    """
    Decode a response body that may still be gzip compressed.

    requests inflates bodies labelled with Content-Encoding: gzip; bodies
    that arrive compressed without the header are detected by magic bytes.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content

    if content[:2] == GZIP_MAGIC:
        try:
            content = gzip.decompress(content)
        except (OSError, EOFError, zlib.error) as e:
            raise MalformedPayloadError(f"Failed to read gzipped response body: {e}") from e
        logger.debug(f"Inflated gzip body (Content-Encoding: {content_encoding or 'none'})")

    return content.decode("utf-8", errors="replace")


def _check_status(response, source: str, body: str) -> None:
    if response.status_code != 200:
        snippet = body[:200].strip()
        logger.error(f"[{source}] Upstream returned HTTP {response.status_code}")
        raise UpstreamStatusError(
            f"{source} returned non-OK status: {response.status_code}"
            + (f" - {snippet}" if snippet else ""),
            status_code=response.status_code,
        )


def _send(method: str, url: str, source: str, timeout: Optional[float] = None, **kwargs) -> str:
    settings = get_settings()
    timeout = timeout or settings.request_timeout
    headers = {"User-Agent": settings.user_agent}
    headers.update(kwargs.pop("headers", None) or {})

    start_time = time.time()
    try:
        if method == "GET":
            response = requests.get(url, headers=headers, timeout=timeout, **kwargs)
        else:
            response = requests.post(url, headers=headers, timeout=timeout, **kwargs)
    except requests.exceptions.Timeout as e:
        logger.error(f"[{source}] Timeout after {timeout}s: {url}")
        raise UpstreamUnreachableError(f"{source} did not respond within {timeout:g}s") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"[{source}] Network error: {e}")
        raise UpstreamUnreachableError(f"Failed to reach {source}: {str(e)[:100]}") from e

    response_time_ms = int((time.time() - start_time) * 1000)
    response_headers = getattr(response, "headers", None) or {}
    body = decode_body(response.content, response_headers.get("Content-Encoding"))
    logger.debug(f"[{source}] {method} {url} -> {response.status_code} ({response_time_ms} ms, {len(body)} chars)")

    _check_status(response, source, body)
    return body


def get_text(url: str, source: str, params: Optional[Dict[str, Any]] = None,
             headers: Optional[Dict[str, str]] = None, timeout: Optional[float] = None) -> str:
    """GET a document and return its decoded body."""
    merged = dict(BROWSER_HEADERS)
    merged.update(headers or {})
    return _send("GET", url, source, timeout=timeout, params=params, headers=merged)


def post_json(url: str, payload: Dict[str, Any], source: str) -> str:
    """POST a JSON body and return the raw decoded response text."""
    return _send(
        "POST",
        url,
        source,
        data=json.dumps(payload),
        headers={"Content-Type": "application/json"},
    )
