from .config import ConsoleConfig, load_config
from .session import ConsoleSession, ExecutionOutcome

__all__ = ["ConsoleConfig", "load_config", "ConsoleSession", "ExecutionOutcome"]
