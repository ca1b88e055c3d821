"""Git collaborators used by qmdtools commands."""

from .discovery import DocumentDiscovery
from .status import GitNotFoundError, StatusReporter, render_status

__all__ = ["DocumentDiscovery", "GitNotFoundError", "StatusReporter", "render_status"]
