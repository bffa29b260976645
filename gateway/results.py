from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


@dataclass
class ToolResult:
    """What a tool call hands back to the protocol layer.

    ``payload`` is JSON-serializable data on success. On failure it is either a
    plain message (rendered as ``Error: <message>``) or a structured body such
    as a not-found hint.
    """

    payload: Any
    is_error: bool = False

    @classmethod
    def ok(cls, payload: Any) -> "ToolResult":
        return cls(payload=payload, is_error=False)

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(payload=message, is_error=True)

    @classmethod
    def flagged(cls, body: Any) -> "ToolResult":
        return cls(payload=body, is_error=True)

    def to_text(self) -> str:
        if self.is_error and isinstance(self.payload, str):
            return f"Error: {self.payload}"
        return json.dumps(self.payload, indent=2, ensure_ascii=False, default=str)
