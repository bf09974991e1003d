"""
Session Manager - Owns the authenticated/unauthenticated duality.
Restores, creates and ends sessions and decides which screen is reachable.
"""
import inspect
import logging
from typing import Optional, Callable, Any

from .credential_store import CredentialStore
from .gateway import GatewayClient
from ..config import settings
from ..errors import WorkbenchError, Unauthorized
from ..models.session import Session, SessionState, Screen, User

logger = logging.getLogger(__name__)

ScreenListener = Callable[[Screen], Any]


class SessionManager:
    """
    Session lifecycle and screen routing.

    The in-memory session is the single owner of the token; the credential
    store only mirrors it so it survives restarts.
    """

    def __init__(
        self,
        gateway: GatewayClient,
        credentials: CredentialStore,
        logout_on_unauthorized: Optional[bool] = None
    ):
        self.gateway = gateway
        self.credentials = credentials
        self.logout_on_unauthorized = (
            settings.logout_on_unauthorized
            if logout_on_unauthorized is None
            else logout_on_unauthorized
        )
        self.session: Optional[Session] = None
        self.screen: Screen = Screen.LOGIN
        self.busy = False
        self.error: Optional[str] = None
        self.notice: Optional[str] = None
        self._listeners: list[ScreenListener] = []

    @property
    def state(self) -> SessionState:
        if self.session is None:
            return SessionState.UNAUTHENTICATED
        return SessionState.AUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    @property
    def token(self) -> str:
        """Bearer token of the current session."""
        if self.session is None:
            raise Unauthorized("Not logged in")
        return self.session.token

    def subscribe(self, listener: ScreenListener):
        """Register a callback run (and awaited, if async) on every screen change."""
        self._listeners.append(listener)

    async def _route(self, screen: Screen):
        if screen == Screen.DASHBOARD and not self.is_authenticated:
            raise Unauthorized("Not logged in")
        previous, self.screen = self.screen, screen
        logger.info(f"Screen: {previous.value} -> {screen.value}")
        for listener in self._listeners:
            result = listener(screen)
            if inspect.isawaitable(result):
                await result

    async def bootstrap(self) -> SessionState:
        """
        Restore a stored token on startup.

        The token is trusted without a server round-trip; an expired token is
        discovered by the first protected call (see handle_unauthorized).
        """
        token = self.credentials.load()
        if token:
            self.session = Session(token=token, user=User(), restored=True)
            logger.info("Restored session from stored credentials")
            await self._route(Screen.DASHBOARD)
        else:
            self.session = None
            await self._route(Screen.LOGIN)
        return self.state

    async def login(self, email: str, password: str) -> bool:
        """Log in; on failure the message is kept in ``error``."""
        if self.busy:
            logger.debug("Login already in progress")
            return False
        self.busy = True
        self.error = None
        self.notice = None
        try:
            response = await self.gateway.login(email, password)
        except WorkbenchError as e:
            logger.warning(f"Login failed for {email}: {e.message}")
            self.error = e.message
            return False
        finally:
            self.busy = False

        self.session = Session(token=response.access_token, user=User(email=email))
        self.credentials.save(response.access_token)
        logger.info(f"Logged in as {email}")
        await self._route(Screen.DASHBOARD)
        return True

    async def register(self, email: str, password: str) -> bool:
        """Create an account and send the traveler to the login screen."""
        if self.busy:
            logger.debug("Registration already in progress")
            return False
        self.busy = True
        self.error = None
        self.notice = None
        try:
            await self.gateway.register(email, password)
        except WorkbenchError as e:
            logger.warning(f"Registration failed for {email}: {e.message}")
            self.error = e.message
            return False
        finally:
            self.busy = False

        logger.info(f"Registered {email}")
        self.notice = "Registration successful! Please log in."
        await self._route(Screen.LOGIN)
        return True

    async def show_register(self):
        if self.is_authenticated:
            return
        self.error = None
        await self._route(Screen.REGISTER)

    async def show_login(self):
        if self.is_authenticated:
            return
        self.error = None
        await self._route(Screen.LOGIN)

    async def logout(self):
        """Drop the session locally. The token is not revoked server-side."""
        self.session = None
        self.credentials.clear()
        logger.info("Logged out")
        await self._route(Screen.LOGIN)

    async def handle_unauthorized(self, error: Optional[Unauthorized] = None):
        """React to a protected call rejected for lack of a valid session."""
        if not self.logout_on_unauthorized or not self.is_authenticated:
            return
        logger.warning("Protected call rejected, ending session")
        await self.logout()
        self.error = (error or Unauthorized()).message
