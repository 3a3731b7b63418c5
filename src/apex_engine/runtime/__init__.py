"""Runtime services (telemetry) shared by the buffer, expression and action layers."""

from . import telemetry

__all__ = ["telemetry"]
