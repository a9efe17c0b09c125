# fsconsole/stream/errors.py
from __future__ import annotations

class TransportError(Exception):
    """Base class for stream transport failures."""

class TransportOpenError(TransportError):
    pass

class TransportIOError(TransportError):
    pass
