"""Asana API access for the sync."""

from asana_gtasks.asana.client import AsanaClient, SourceTask
from asana_gtasks.asana.exceptions import AsanaAPIError, AsanaAuthError, AsanaError

__all__ = [
    "AsanaClient",
    "SourceTask",
    "AsanaError",
    "AsanaAPIError",
    "AsanaAuthError",
]
