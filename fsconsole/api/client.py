# fsconsole/api/client.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import requests

from fsconsole.core.errors import CommandExecutionError
from . import errors as kinds
from .errors import ApiError
from .suggestions import suggest


@dataclass(frozen=True)
class ApiResponse:
    status: str
    message: str
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.status.lower() != "error"

    @classmethod
    def from_json(cls, body: Any) -> "ApiResponse":
        if not isinstance(body, dict):
            return cls(status="success", message="", data=body)
        return cls(
            status=str(body.get("status", "success") or "success"),
            message=str(body.get("message", "") or ""),
            data=body.get("data"),
        )


class CommandExecutor(Protocol):
    """Anything that can run one canonical command line on the backend."""
    def execute(self, command: str) -> ApiResponse: ...


class ApiClient:
    """
    HTTP client for the filesystem backend (`<base_url>/execute`, `/health`, ...).

    Every failure is raised as CommandExecutionError carrying one ApiError.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = 10.0,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = float(timeout_s)
        self._log = logger or logging.getLogger(__name__)
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    # ---------------- Endpoints ----------------
    def health(self) -> ApiResponse:
        return self._request("GET", "/health")

    def filesystems(self) -> ApiResponse:
        return self._request("GET", "/filesystems")

    def create_partition(self, *, name: str, size: int, type: str, path: str) -> ApiResponse:
        return self._request(
            "POST",
            "/partition",
            json={"name": name, "size": int(size), "type": type, "path": path},
        )

    def execute(self, command: str) -> ApiResponse:
        self._log.info("EXECUTE command=%s", command)
        return self._request("POST", "/execute", json={"command": command}, command=command)

    def test_connection(self) -> bool:
        try:
            self.health()
            return True
        except CommandExecutionError as e:
            self._log.warning("HEALTH_CHECK_FAILED kind=%s msg=%s", e.error.kind, e.message)
            return False

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---------------- Internals ----------------
    def _request(self, method: str, path: str, *, json: Any = None, command: Optional[str] = None) -> ApiResponse:
        url = f"{self.base_url}{path}"
        try:
            resp = self._session.request(method, url, json=json, timeout=self.timeout_s)
        except requests.exceptions.Timeout:
            raise self._fail(kinds.TIMEOUT, f"request to {url} timed out after {self.timeout_s}s", command) from None
        except requests.exceptions.ConnectionError as e:
            raise self._fail(kinds.CONNECTION, f"cannot connect to {self.base_url}: {e}", command) from None
        except requests.exceptions.RequestException as e:
            raise self._fail(kinds.CONNECTION, str(e), command) from None

        if resp.status_code >= 400:
            message = _error_message(resp) or f"HTTP {resp.status_code} {resp.reason or ''}".strip()
            raise self._fail(kinds.HTTP, message, command, http_status=resp.status_code)

        try:
            body = resp.json()
        except ValueError:
            raise self._fail(kinds.DECODE, f"invalid JSON from {url}", command, http_status=resp.status_code) from None

        result = ApiResponse.from_json(body)
        if not result.ok and command is not None:
            raise self._fail(kinds.REJECTED, result.message or "command rejected", command, http_status=resp.status_code)
        return result

    def _fail(
        self,
        kind: str,
        message: str,
        command: Optional[str],
        *,
        http_status: Optional[int] = None,
    ) -> CommandExecutionError:
        error = ApiError(
            kind=kind,
            message=message,
            http_status=http_status,
            suggestions=tuple(suggest(command or "", message)),
            command=command,
        )
        self._log.warning("API_REQUEST_FAILED kind=%s status=%s msg=%s", kind, http_status, message)
        return CommandExecutionError(error, details={"command": command} if command else None)


def _error_message(resp: requests.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        text = (resp.text or "").strip()
        return text or None
    if isinstance(body, dict):
        msg = body.get("message") or body.get("error")
        return str(msg) if msg else None
    return None
