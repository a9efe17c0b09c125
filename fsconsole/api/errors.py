# fsconsole/api/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

# Error kinds produced at the HTTP boundary
CONNECTION = "connection"
TIMEOUT = "timeout"
HTTP = "http"
DECODE = "decode"
REJECTED = "rejected"

_TITLES = {
    CONNECTION: "Connection error",
    TIMEOUT: "Request timed out",
    HTTP: "Backend error",
    DECODE: "Invalid backend response",
    REJECTED: "Command rejected",
}


@dataclass(frozen=True)
class ApiError:
    """
    Structured backend failure. Built once where the request fails and passed
    around by value.
    """
    kind: str
    message: str
    http_status: Optional[int] = None
    suggestions: Tuple[str, ...] = ()
    command: Optional[str] = None

    @property
    def title(self) -> str:
        return _TITLES.get(self.kind, "Error")

    def as_dict(self) -> dict:
        return {
            "kind": self.kind,
            "title": self.title,
            "message": self.message,
            "http_status": self.http_status,
            "suggestions": list(self.suggestions),
            "command": self.command,
        }
