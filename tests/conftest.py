"""Shared fixtures: a fake remote service reached through httpx's ASGI transport."""
import httpx
import pytest

from trip_workbench.services.credential_store import CredentialStore
from trip_workbench.services.gateway import GatewayClient
from trip_workbench.services.itinerary_store import ItineraryStore
from trip_workbench.services.workbench import ItineraryWorkbench

from .fake_service import create_fake_service

BASE_URL = "http://testserver"
EMAIL = "traveler@example.com"
PASSWORD = "secret"


class Confirmer:
    """Stands in for the confirmation dialog and records its prompts."""

    def __init__(self, answer: bool = True):
        self.answer = answer
        self.prompts: list[str] = []

    def __call__(self, message: str) -> bool:
        self.prompts.append(message)
        return self.answer


@pytest.fixture
def service():
    return create_fake_service()


@pytest.fixture
def backend(service):
    return service.state.backend


@pytest.fixture
def gateway(service):
    return GatewayClient(base_url=BASE_URL, transport=httpx.ASGITransport(app=service))


@pytest.fixture
def credentials(tmp_path):
    return CredentialStore(db_path=tmp_path / "credentials.db", origin=BASE_URL, key="token")


@pytest.fixture
def token(backend):
    return backend.add_user(EMAIL, PASSWORD)


@pytest.fixture
def store(gateway, token):
    return ItineraryStore(gateway, lambda: token)


@pytest.fixture
def confirmer():
    return Confirmer()


@pytest.fixture
def workbench(gateway, store, token, confirmer):
    return ItineraryWorkbench(gateway, store, token_provider=lambda: token, confirm=confirmer)
