"""Tests for the console front end."""
import asyncio
import pytest
from datetime import date

from trip_workbench.main import Console
from trip_workbench.models.workbench_state import Busy, WorkbenchMode
from trip_workbench.services.app_controller import AppController

from .conftest import EMAIL, PASSWORD, Confirmer


@pytest.fixture
def console(gateway, credentials, token):
    return Console(AppController(Confirmer(), gateway=gateway, credentials=credentials))


class TestConsole:
    """Drive the workbench through typed commands."""

    @pytest.mark.asyncio
    async def test_requires_login(self, console):
        assert await console.handle("new") == "Please log in first."

    @pytest.mark.asyncio
    async def test_create_itinerary_flow(self, console, backend):
        output = await console.handle(f"login {EMAIL} {PASSWORD}")
        assert "No itineraries yet" in output

        await console.handle("new")
        await console.handle('dest "Paris, France"')
        await console.handle("dates 2024-06-01 2024-06-03")
        await console.handle("interest set 0 museums")
        await console.handle("interest add food")

        output = await console.handle("generate")
        assert "Preview: 3 days" in output
        assert "Day 3" in output

        output = await console.handle("save")
        assert "[1] Paris, France" in output
        assert console.workbench.mode == WorkbenchMode.LISTING
        assert "create" in backend.calls

    @pytest.mark.asyncio
    async def test_save_needs_preview(self, console):
        await console.handle(f"login {EMAIL} {PASSWORD}")
        await console.handle("new")

        assert await console.handle("save") == "Generate an itinerary before saving."

    @pytest.mark.asyncio
    async def test_bad_dates_reported(self, console):
        await console.handle(f"login {EMAIL} {PASSWORD}")
        await console.handle("new")

        assert await console.handle("dates soon later") == "Error: Dates must be given as YYYY-MM-DD"

    @pytest.mark.asyncio
    async def test_show_and_delete(self, console, backend):
        backend.seed(EMAIL, itinerary_id=2, destination="Rome, Italy")
        await console.handle(f"login {EMAIL} {PASSWORD}")

        output = await console.handle("show 2")
        assert "Day 1" in output

        output = await console.handle("delete 2")
        assert "No itineraries yet" in output
        assert console.workbench.mode == WorkbenchMode.LISTING

    @pytest.mark.asyncio
    async def test_wrong_state_command(self, console):
        await console.handle(f"login {EMAIL} {PASSWORD}")

        assert (await console.handle("cancel")).startswith("Not available here")

    @pytest.mark.asyncio
    async def test_quit(self, console):
        assert await console.handle("quit") == "Goodbye!"
        assert console.running is False

    @pytest.mark.asyncio
    async def test_rejected_dates_keep_previous_dates(self, console):
        await console.handle(f"login {EMAIL} {PASSWORD}")
        await console.handle("new")
        await console.handle("dates 2024-06-01 2024-06-03")

        assert await console.handle("dates 2024-07-01 garbage") == "Error: Dates must be given as YYYY-MM-DD"

        draft = console.workbench.drafting.draft
        assert draft.start_date == date(2024, 6, 1)
        assert draft.end_date == date(2024, 6, 3)

    @pytest.mark.asyncio
    async def test_save_while_saving_is_reported(self, console, backend):
        await console.handle(f"login {EMAIL} {PASSWORD}")
        await console.handle("new")
        await console.handle('dest "Paris, France"')
        await console.handle("dates 2024-06-01 2024-06-03")
        await console.handle("generate")

        first = asyncio.create_task(console.handle("save"))
        await asyncio.sleep(0)
        assert console.workbench.drafting.busy == Busy.SAVING

        assert await console.handle("save") == "Save is already in progress."
        await first
        assert backend.calls.count("create") == 1
