# src/code_planner/errors.py

"""
Error taxonomy shared by the generator, updater, store and request handlers.

- ValidationError: bad caller input (client-class, message shown verbatim).
- ConfigurationError: upstream credential missing (server-class, fixed message).
- UpstreamError: transport failure or unparseable model output (server-class).
- PlannerBusyError: a generate/update call is already running.
"""

from __future__ import annotations


class PlannerError(Exception):
    """Base class for all code-planner errors."""

    status_code = 500


class ValidationError(PlannerError):
    status_code = 400


class ConfigurationError(PlannerError):
    status_code = 500

    public_message = "API key not configured. Please set OPENAI_API_KEY environment variable."


class UpstreamError(PlannerError):
    status_code = 500


class PlannerBusyError(PlannerError):
    status_code = 409

    def __init__(self, message: str = "Another generate/update request is already running.") -> None:
        super().__init__(message)
