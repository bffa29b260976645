from __future__ import annotations

import re
from typing import Optional

_BODY_SNIPPET = 200


class BackendError(Exception):
    """Any failure talking to a backend; callers only need ``str(error)``."""

    def __init__(self, service: str, message: str) -> None:
        super().__init__(message)
        self.service = service
        self.message = message


class TransportError(BackendError):
    """Non-2xx HTTP status, or the request never got a response."""

    def __init__(
        self,
        service: str,
        status: Optional[int] = None,
        status_text: str = "",
        body: str = "",
    ) -> None:
        self.status = status
        self.status_text = status_text
        self.body = body
        if status is None:
            message = f"{service} API error: {status_text or 'request failed'}"
        else:
            message = f"{service} API error: {status} {status_text}".rstrip()
        snippet = summarize_body(body)
        if snippet:
            message = f"{message} - {snippet}"
        super().__init__(service, message)


class ApplicationError(BackendError):
    """The backend answered 200 but flagged the call as failed in its payload."""


def summarize_body(body: str, limit: int = _BODY_SNIPPET) -> str:
    text = re.sub(r"\s+", " ", body or "").strip()
    if len(text) > limit:
        return text[:limit] + "..."
    return text
