"""Over-collateralized synthetic-asset engine."""
from .errors import EngineError, ErrorKind
from .services.engine import CoreEngine

__all__ = ["CoreEngine", "EngineError", "ErrorKind"]
