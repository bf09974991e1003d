"""
Gateway Client - The only path to the remote itinerary service.
Serializes requests, attaches the bearer token and maps failures to domain errors.
"""
import httpx
import logging
from typing import Optional, Union, Type, Tuple, Dict, Any
from pydantic import BaseModel, ValidationError as SchemaError

from ..config import settings
from ..errors import (
    WorkbenchError,
    ValidationError,
    InvalidCredentials,
    Unauthorized,
    NotFound,
    Conflict,
    GenerationFailed,
    TransportError,
)
from ..models.itinerary import (
    GenerateRequest,
    GeneratedPreview,
    ItineraryPayload,
    ItineraryRecord,
)
from ..models.session import TokenResponse

logger = logging.getLogger(__name__)

# Status code -> error class, or (error class, fixed message)
ErrorMap = Dict[int, Union[Type[WorkbenchError], Tuple[Type[WorkbenchError], str]]]

LOGIN_ERRORS: ErrorMap = {
    401: (InvalidCredentials, "Invalid email or password"),
    400: ValidationError,
    422: (ValidationError, "Invalid email format"),
}
REGISTER_ERRORS: ErrorMap = {
    400: Conflict,
    409: Conflict,
    422: ValidationError,
}
PROTECTED_ERRORS: ErrorMap = {
    401: Unauthorized,
    403: Unauthorized,
    404: NotFound,
    422: ValidationError,
}
GENERATE_ERRORS: ErrorMap = {
    401: Unauthorized,
    403: Unauthorized,
}


def _error_detail(response: httpx.Response) -> Optional[str]:
    """Pull a human-readable message out of a FastAPI-style error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or None
    if not isinstance(body, dict):
        return None
    detail = body.get("detail")
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list):
        # Request validation errors: [{"loc": [...], "msg": "..."}]
        messages = [d.get("msg") for d in detail if isinstance(d, dict) and d.get("msg")]
        return "; ".join(messages) or None
    return None


class GatewayClient:
    """
    Async client for the remote itinerary service.

    Holds no session state: every authenticated call takes the bearer token
    as a parameter. Each call is made once; failures raise a WorkbenchError.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    @staticmethod
    def _auth_headers(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    async def _request(
        self,
        method: str,
        path: str,
        errors: ErrorMap,
        fallback: Type[WorkbenchError] = TransportError,
        token: Optional[str] = None,
        **kwargs
    ) -> httpx.Response:
        """Send one request and raise the mapped domain error on failure."""
        headers = kwargs.pop("headers", {})
        if token is not None:
            headers.update(self._auth_headers(token))

        async with self._client() as client:
            try:
                response = await client.request(method, path, headers=headers, **kwargs)
            except httpx.RequestError as e:
                logger.error(f"{method} {path} failed: {e!r}")
                raise TransportError(f"Could not reach the itinerary service: {e}") from e

        logger.info(f"{method} {path} -> {response.status_code}")
        if response.is_success:
            return response

        mapped = errors.get(response.status_code, fallback)
        if isinstance(mapped, tuple):
            error_cls, message = mapped
        else:
            error_cls, message = mapped, _error_detail(response)
        if error_cls is TransportError and message is None:
            message = f"Unexpected response from the itinerary service (HTTP {response.status_code})"
        raise error_cls(message, status_code=response.status_code)

    @staticmethod
    def _parse(
        response: httpx.Response,
        model: Type[BaseModel],
        error_cls: Type[WorkbenchError] = TransportError
    ) -> Any:
        try:
            return model.model_validate(response.json())
        except (ValueError, SchemaError) as e:
            logger.error(f"Malformed {model.__name__} response: {e}")
            raise error_cls("Malformed response from the itinerary service") from e

    @staticmethod
    def _json(response: httpx.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {"result": body}

    # Authentication

    async def login(self, email: str, password: str) -> TokenResponse:
        """Exchange credentials for a bearer token (OAuth2 password form)."""
        response = await self._request(
            "POST", "/token", LOGIN_ERRORS,
            data={"username": email, "password": password},
        )
        return self._parse(response, TokenResponse)

    async def register(self, email: str, password: str) -> dict:
        """Create an account."""
        response = await self._request(
            "POST", "/register", REGISTER_ERRORS,
            json={"email": email, "password": password},
        )
        return self._json(response)

    # Itineraries

    async def generate(self, request: GenerateRequest, token: str) -> GeneratedPreview:
        """Ask the service for a day-by-day itinerary preview."""
        response = await self._request(
            "POST", "/api/itinerary/generate", GENERATE_ERRORS,
            fallback=GenerationFailed,
            token=token,
            json=request.model_dump(mode="json"),
        )
        return self._parse(response, GeneratedPreview, GenerationFailed)

    def _parse_saved(self, response: httpx.Response) -> Optional[ItineraryRecord]:
        """
        Parse the record echoed by a successful create/update.

        The write already happened, so an unusable body is logged and
        reported as None instead of failing the save.
        """
        try:
            return ItineraryRecord.model_validate(response.json())
        except (ValueError, SchemaError) as e:
            logger.warning(f"Itinerary saved but the reply could not be read: {e}")
            return None

    async def create(self, payload: ItineraryPayload, token: str) -> Optional[ItineraryRecord]:
        response = await self._request(
            "POST", "/api/itinerary", PROTECTED_ERRORS,
            token=token,
            json=payload.model_dump(mode="json"),
        )
        return self._parse_saved(response)

    async def update(self, itinerary_id: int, payload: ItineraryPayload, token: str) -> Optional[ItineraryRecord]:
        response = await self._request(
            "PATCH", f"/api/itinerary/{itinerary_id}", PROTECTED_ERRORS,
            token=token,
            json=payload.model_dump(mode="json"),
        )
        return self._parse_saved(response)

    async def list(self, token: str) -> list[ItineraryRecord]:
        """Saved itineraries. Entries that fail validation are skipped."""
        response = await self._request(
            "GET", "/api/itinerary", PROTECTED_ERRORS,
            token=token,
        )
        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Malformed itinerary list response: {e}")
            raise TransportError("Malformed response from the itinerary service") from e
        if not isinstance(body, list):
            logger.error("Malformed itinerary list response: expected a JSON array")
            raise TransportError("Malformed response from the itinerary service")

        records = []
        for item in body:
            try:
                records.append(ItineraryRecord.model_validate(item))
            except SchemaError as e:
                item_id = item.get("id") if isinstance(item, dict) else None
                logger.warning(f"Skipping unreadable itinerary {item_id}: {e}")
        return records

    async def delete(self, itinerary_id: int, token: str) -> dict:
        response = await self._request(
            "DELETE", f"/api/itinerary/{itinerary_id}", PROTECTED_ERRORS,
            token=token,
        )
        return self._json(response)


# Global gateway client instance
gateway_client: Optional[GatewayClient] = None


def get_gateway_client() -> GatewayClient:
    """Get or create the global gateway client."""
    global gateway_client
    if gateway_client is None:
        gateway_client = GatewayClient()
    return gateway_client
