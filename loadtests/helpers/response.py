"""Response error extraction for load test observability.

Parses Marketplace API error responses into human-readable messages. Errors
look like ``{"message": "...", "errorType": "...", ...detail}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact error message suitable for Locust failure messages."""
    try:
        body = response.json()
    except Exception:
        # Not JSON: return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body, dict) and "errorType" in body:
        extra = {k: v for k, v in body.items() if k not in ("message", "errorType")}
        detail = f"{body['errorType']}: {body.get('message', '')}"
        if extra:
            detail += " " + ", ".join(f"{k}={v}" for k, v in extra.items())
        return detail

    # Unknown shape: stringify and truncate
    return str(body)[:300]
