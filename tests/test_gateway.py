"""Tests for the gateway client against the fake service and failing transports."""
import httpx
import pytest
from datetime import date

from trip_workbench.errors import (
    Conflict,
    GenerationFailed,
    InvalidCredentials,
    NotFound,
    TransportError,
    Unauthorized,
    ValidationError,
)
from trip_workbench.models.itinerary import GenerateRequest, ItineraryPayload
from trip_workbench.services.gateway import GatewayClient

from .conftest import BASE_URL, EMAIL, PASSWORD


def _paris_request() -> GenerateRequest:
    return GenerateRequest(
        destination="Paris, France",
        start_date=date(2024, 6, 1),
        end_date=date(2024, 6, 3),
        interests=["museums", "food"],
    )


def _gateway_with(handler) -> GatewayClient:
    return GatewayClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))


class TestAuthentication:
    """Test login and registration."""

    @pytest.mark.asyncio
    async def test_login_returns_token(self, gateway, backend, token):
        response = await gateway.login(EMAIL, PASSWORD)

        assert response.token_type == "bearer"
        assert backend.tokens[response.access_token] == EMAIL

    @pytest.mark.asyncio
    async def test_login_is_form_encoded(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = request.content.decode()
            return httpx.Response(200, json={"access_token": "abc", "token_type": "bearer"})

        await _gateway_with(handler).login("a@b.com", "pw")

        assert seen["content_type"] == "application/x-www-form-urlencoded"
        assert seen["body"] == "username=a%40b.com&password=pw"

    @pytest.mark.asyncio
    async def test_wrong_password(self, gateway, token):
        with pytest.raises(InvalidCredentials) as exc:
            await gateway.login(EMAIL, "wrong")
        assert exc.value.message == "Invalid email or password"
        assert exc.value.status_code == 401

    @pytest.mark.asyncio
    async def test_malformed_email(self, gateway):
        with pytest.raises(ValidationError) as exc:
            await gateway.login("not-an-email", "pw")
        assert exc.value.message == "Invalid email format"

    @pytest.mark.asyncio
    async def test_register_and_duplicate(self, gateway, backend):
        await gateway.register("new@example.com", "pw")
        assert "new@example.com" in backend.users

        with pytest.raises(Conflict) as exc:
            await gateway.register("new@example.com", "pw")
        assert exc.value.message == "Email already registered"

    @pytest.mark.asyncio
    async def test_register_invalid_email(self, gateway):
        with pytest.raises(ValidationError):
            await gateway.register("nope", "pw")


class TestItineraryCalls:
    """Test generate and CRUD calls."""

    @pytest.mark.asyncio
    async def test_generate(self, gateway, token):
        preview = await gateway.generate(_paris_request(), token)

        assert preview.days_count == 3
        assert [d.day for d in preview.itinerary] == [1, 2, 3]
        assert preview.itinerary[0].activities == [
            "Explore museums in Paris, France",
            "Explore food in Paris, France",
        ]

    @pytest.mark.asyncio
    async def test_generate_failure(self, gateway, token):
        request = _paris_request().model_copy(update={"destination": "Atlantis"})

        with pytest.raises(GenerationFailed):
            await gateway.generate(request, token)

    @pytest.mark.asyncio
    async def test_inconsistent_preview_is_generation_failure(self, token):
        def handler(request):
            return httpx.Response(200, json={"days_count": 2, "itinerary": [{"day": 1, "activities": []}]})

        with pytest.raises(GenerationFailed):
            await _gateway_with(handler).generate(_paris_request(), token)

    @pytest.mark.asyncio
    async def test_bearer_token_attached(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers.get("authorization"))
            return httpx.Response(200, json=[])

        await _gateway_with(handler).list("tok-123")

        assert seen == ["Bearer tok-123"]

    @pytest.mark.asyncio
    async def test_create_list_update_delete(self, gateway, token):
        preview = await gateway.generate(_paris_request(), token)
        payload = ItineraryPayload.from_preview(_paris_request(), preview)

        created = await gateway.create(payload, token)
        assert created.id >= 1
        assert created.days_count == 3

        listed = await gateway.list(token)
        assert [r.id for r in listed] == [created.id]

        changed = payload.model_copy(update={"destination": "Lyon, France"})
        updated = await gateway.update(created.id, changed, token)
        assert updated.id == created.id
        assert updated.destination == "Lyon, France"

        await gateway.delete(created.id, token)
        assert await gateway.list(token) == []

    @pytest.mark.asyncio
    async def test_protected_call_without_valid_token(self, gateway):
        with pytest.raises(Unauthorized):
            await gateway.list("bogus")

    @pytest.mark.asyncio
    async def test_missing_record(self, gateway, token):
        with pytest.raises(NotFound):
            await gateway.delete(404, token)


class TestTransportFailures:
    """Test network-level failures and unusable responses."""

    @pytest.mark.asyncio
    async def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError):
            await _gateway_with(handler).list("tok")

    @pytest.mark.asyncio
    async def test_unexpected_status(self):
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        with pytest.raises(TransportError) as exc:
            await _gateway_with(handler).list("tok")
        assert exc.value.status_code == 502

    @pytest.mark.asyncio
    async def test_malformed_list(self):
        def handler(request):
            return httpx.Response(200, json={"items": []})

        with pytest.raises(TransportError):
            await _gateway_with(handler).list("tok")

    @pytest.mark.asyncio
    async def test_unreadable_list_entry_is_skipped(self):
        good = {
            "id": 1,
            "destination": "Rome, Italy",
            "start_date": "2024-06-01",
            "end_date": "2024-06-02",
            "interests": [],
            "days_count": 2,
            "generated_itinerary": [{"day": 1, "activities": []}, {"day": 2, "activities": []}],
        }
        broken = dict(good, id=2, days_count=5)

        def handler(request):
            return httpx.Response(200, json=[good, broken, "junk"])

        records = await _gateway_with(handler).list("tok")

        assert [r.id for r in records] == [1]

    @pytest.mark.asyncio
    async def test_unreadable_save_reply_is_not_an_error(self, token):
        def handler(request):
            return httpx.Response(201, json={"id": 1, "message": "created"})

        preview_days = [{"day": n, "activities": []} for n in (1, 2, 3)]
        payload = ItineraryPayload(**_paris_request().model_dump(), days_count=3, generated_itinerary=preview_days)

        assert await _gateway_with(handler).create(payload, token) is None
