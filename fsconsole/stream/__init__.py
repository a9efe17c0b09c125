from .client import ReconnectingStreamClient
from .errors import TransportError, TransportOpenError, TransportIOError
from .history import LogHistory
from .normalizer import LogNormalizer
from .state import ConnectionState, LogEntry, Severity, StreamStatus
from .transport import StreamListener, StreamTransport, WebSocketTransport

__all__ = [
    "ReconnectingStreamClient",
    "TransportError", "TransportOpenError", "TransportIOError",
    "LogHistory",
    "LogNormalizer",
    "ConnectionState", "LogEntry", "Severity", "StreamStatus",
    "StreamListener", "StreamTransport", "WebSocketTransport",
]
