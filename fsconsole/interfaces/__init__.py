from .log_sink import LogSink

__all__ = ["LogSink"]
