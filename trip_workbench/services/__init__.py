"""Services for the itinerary workbench."""
from .credential_store import CredentialStore
from .gateway import GatewayClient
from .session_manager import SessionManager
from .itinerary_store import ItineraryStore
from .workbench import ItineraryWorkbench
from .app_controller import AppController

__all__ = [
    "CredentialStore",
    "GatewayClient",
    "SessionManager",
    "ItineraryStore",
    "ItineraryWorkbench",
    "AppController",
]
