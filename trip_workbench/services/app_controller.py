"""
App Controller - Wires the session lifecycle to the itinerary workbench.
"""
import logging
from typing import Optional, Callable, Any

from .credential_store import CredentialStore
from .gateway import GatewayClient, get_gateway_client
from .itinerary_store import ItineraryStore
from .session_manager import SessionManager
from .workbench import ItineraryWorkbench
from ..models.session import Screen

logger = logging.getLogger(__name__)


class AppController:
    """
    Owns one session manager and, while authenticated, one workbench.

    Entering the dashboard opens a fresh workbench and loads the list;
    leaving it closes the workbench so unsaved work and late results are
    discarded.
    """

    def __init__(
        self,
        confirm: Callable[[str], Any],
        gateway: Optional[GatewayClient] = None,
        credentials: Optional[CredentialStore] = None,
        logout_on_unauthorized: Optional[bool] = None
    ):
        self.gateway = gateway or get_gateway_client()
        self.credentials = credentials or CredentialStore(origin=self.gateway.base_url)
        self.confirm = confirm
        self.session = SessionManager(
            self.gateway,
            self.credentials,
            logout_on_unauthorized=logout_on_unauthorized,
        )
        self.workbench: Optional[ItineraryWorkbench] = None
        self.session.subscribe(self._on_screen)

    @property
    def screen(self) -> Screen:
        return self.session.screen

    async def start(self):
        """Restore any stored session and route to the first screen."""
        await self.session.bootstrap()

    async def _on_screen(self, screen: Screen):
        if screen == Screen.DASHBOARD:
            if self.workbench is not None:
                self.workbench.close()
            store = ItineraryStore(self.gateway, lambda: self.session.token)
            self.workbench = ItineraryWorkbench(
                self.gateway,
                store,
                token_provider=lambda: self.session.token,
                confirm=self.confirm,
                on_unauthorized=self.session.handle_unauthorized,
            )
            await self.workbench.open()
        elif self.workbench is not None:
            self.workbench.close()
            self.workbench = None
