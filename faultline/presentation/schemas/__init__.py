from .errors import ApiErrorResponse, TraceFrame
from .system import HealthCheckResponse

__all__ = ["ApiErrorResponse", "TraceFrame", "HealthCheckResponse"]
