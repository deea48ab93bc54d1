"""Client side of the remote browser-automation backend."""

from .forwarder import ENDPOINTS, ActionForwarder, Endpoint
from .http_client import AutomationHttpClient, BackendError, BackendResponse

__all__ = [
    "ActionForwarder",
    "AutomationHttpClient",
    "BackendError",
    "BackendResponse",
    "ENDPOINTS",
    "Endpoint",
]
