"""
Itinerary Workbench - The list / form / detail state machine.

Reconciles the draft form, the ephemeral generation preview and persistence
(create vs. update) into one flow:

    Listing --new / edit--> Drafting --save ok / cancel--> Listing
    Listing --select--> Viewing --close--> Listing
    Viewing --edit--> Drafting

Network results are only applied to the state that issued the call; a result
arriving after the traveler moved on (or logged out) is logged and dropped.
"""
import inspect
import logging
from datetime import date
from typing import Optional, Callable, Any, Union
from pydantic import ValidationError as SchemaError

from .gateway import GatewayClient
from .itinerary_store import ItineraryStore
from ..errors import WorkbenchError, ValidationError, Unauthorized, InvalidTransition
from ..models.draft import Draft
from ..models.itinerary import ItineraryPayload, ItineraryRecord
from ..models.workbench_state import (
    Busy,
    Closed,
    Drafting,
    Listing,
    Viewing,
    WorkbenchMode,
    WorkbenchState,
)

logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = "Are you sure you want to delete this itinerary?"

Confirm = Callable[[str], Any]
UnauthorizedHandler = Callable[[Unauthorized], Any]


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


class ItineraryWorkbench:
    """
    Drives itinerary generation, preview and persistence for one session.

    User-facing failures never escape an action: they are logged and the
    message is kept in ``error``. Calling an action from a state that does
    not offer it raises InvalidTransition.
    """

    def __init__(
        self,
        gateway: GatewayClient,
        store: ItineraryStore,
        token_provider: Callable[[], str],
        confirm: Confirm,
        on_unauthorized: Optional[UnauthorizedHandler] = None
    ):
        self.gateway = gateway
        self.store = store
        self._token_provider = token_provider
        self._confirm = confirm
        self._on_unauthorized = on_unauthorized
        self.state: WorkbenchState = Listing()
        self.error: Optional[str] = None
        self.notice: Optional[str] = None
        self._deleting: set[int] = set()

    # State inspection

    @property
    def mode(self) -> WorkbenchMode:
        return self.state.mode

    @property
    def records(self) -> list[ItineraryRecord]:
        return self.store.records

    @property
    def drafting(self) -> Optional[Drafting]:
        return self.state if isinstance(self.state, Drafting) else None

    @property
    def can_generate(self) -> bool:
        drafting = self.drafting
        return drafting is not None and drafting.busy == Busy.NONE

    @property
    def can_save(self) -> bool:
        drafting = self.drafting
        return (
            drafting is not None
            and drafting.busy == Busy.NONE
            and drafting.preview is not None
        )

    def _require(self, *modes: WorkbenchMode):
        if self.state.mode not in modes:
            allowed = ", ".join(m.value for m in modes)
            raise InvalidTransition(
                f"action needs state {allowed}, workbench is {self.state.mode.value}"
            )
        return self.state

    def _transition(self, state: WorkbenchState):
        logger.info(f"Workbench: {self.state.mode.value} -> {state.mode.value}")
        self.state = state

    def _is_current(self, state: WorkbenchState) -> bool:
        return self.state is state

    async def _fail(self, error: WorkbenchError):
        """Surface a failure to the traveler."""
        logger.warning(f"{type(error).__name__}: {error.message}")
        self.error = error.message
        if isinstance(error, Unauthorized) and self._on_unauthorized is not None:
            await _maybe_await(self._on_unauthorized(error))

    def clear_messages(self):
        self.error = None
        self.notice = None

    # Lifecycle

    async def open(self) -> bool:
        """Enter the authenticated area: list view populated by a full load."""
        self.clear_messages()
        self._transition(Listing())
        return await self._reload()

    def close(self):
        """Detach from the session; unsaved drafts and previews are discarded."""
        if self.state.mode != WorkbenchMode.CLOSED:
            self._transition(Closed())
        self.store.clear()

    async def _reload(self) -> bool:
        try:
            await self.store.reload()
        except WorkbenchError as e:
            await self._fail(e)
            return False
        return True

    async def refresh(self) -> bool:
        self._require(WorkbenchMode.LISTING, WorkbenchMode.VIEWING)
        return await self._reload()

    # Navigation

    def new(self) -> Drafting:
        self._require(WorkbenchMode.LISTING)
        self.clear_messages()
        state = Drafting(draft=Draft.empty())
        self._transition(state)
        return state

    def edit(self, record: ItineraryRecord) -> Drafting:
        self._require(WorkbenchMode.LISTING, WorkbenchMode.VIEWING)
        self.clear_messages()
        state = Drafting(draft=Draft.from_record(record))
        self._transition(state)
        return state

    def cancel(self):
        self._require(WorkbenchMode.DRAFTING)
        self.clear_messages()
        self._transition(Listing())

    def select(self, record: ItineraryRecord) -> Viewing:
        self._require(WorkbenchMode.LISTING)
        self.clear_messages()
        state = Viewing(record=record)
        self._transition(state)
        return state

    def close_view(self):
        self._require(WorkbenchMode.VIEWING)
        self._transition(Listing())

    # Draft editing

    def set_destination(self, destination: str):
        self._require(WorkbenchMode.DRAFTING).draft.destination = destination

    def set_dates(self, start_date: Union[date, str, None], end_date: Union[date, str, None]):
        """Set both dates, or neither when one of them does not parse."""
        draft = self._require(WorkbenchMode.DRAFTING).draft
        try:
            parsed = Draft.model_validate({"start_date": start_date, "end_date": end_date})
        except SchemaError as e:
            raise ValidationError("Dates must be given as YYYY-MM-DD") from e
        draft.start_date = parsed.start_date
        draft.end_date = parsed.end_date

    def add_interest(self, value: str = ""):
        self._require(WorkbenchMode.DRAFTING).draft.add_interest(value)

    def edit_interest(self, index: int, value: str):
        self._require(WorkbenchMode.DRAFTING).draft.edit_interest(index, value)

    def remove_interest(self, index: int) -> bool:
        return self._require(WorkbenchMode.DRAFTING).draft.remove_interest(index)

    # Network actions

    async def generate(self) -> bool:
        """Request a preview for the current draft. The draft itself is untouched."""
        drafting: Drafting = self._require(WorkbenchMode.DRAFTING)
        if drafting.busy != Busy.NONE:
            logger.debug(f"Generate ignored while {drafting.busy.value}")
            return False

        self.clear_messages()
        try:
            request = drafting.draft.to_request()
        except ValidationError as e:
            await self._fail(e)
            return False

        drafting.busy = Busy.GENERATING
        try:
            preview = await self.gateway.generate(request, self._token_provider())
        except WorkbenchError as e:
            drafting.busy = Busy.NONE
            drafting.preview = None
            if not self._is_current(drafting):
                logger.info(f"Discarding generate failure for superseded draft {drafting.draft_key}")
                return False
            await self._fail(e)
            return False

        drafting.busy = Busy.NONE
        if not self._is_current(drafting):
            logger.info(f"Discarding preview for superseded draft {drafting.draft_key}")
            return False
        drafting.preview = preview
        logger.info(f"Generated {preview.days_count}-day preview for {request.destination}")
        return True

    async def save(self) -> bool:
        """Persist the draft with its preview: create, or update when editing."""
        drafting: Drafting = self._require(WorkbenchMode.DRAFTING)
        if drafting.busy != Busy.NONE or drafting.preview is None:
            logger.debug("Save unavailable: no preview or another action in flight")
            return False

        self.clear_messages()
        try:
            request = drafting.draft.to_request()
        except ValidationError as e:
            await self._fail(e)
            return False

        payload = ItineraryPayload.from_preview(request, drafting.preview)
        editing_id = drafting.draft.editing_id
        drafting.busy = Busy.SAVING
        try:
            token = self._token_provider()
            if editing_id is None:
                record = await self.gateway.create(payload, token)
            else:
                record = await self.gateway.update(editing_id, payload, token)
        except WorkbenchError as e:
            drafting.busy = Busy.NONE
            if not self._is_current(drafting):
                logger.info(f"Discarding save failure for superseded draft {drafting.draft_key}")
                return False
            await self._fail(e)
            return False

        drafting.busy = Busy.NONE
        action = "Created" if editing_id is None else "Updated"
        if record is None:
            logger.info(f"{action} itinerary for {payload.destination} (reply unreadable)")
        else:
            logger.info(f"{action} itinerary {record.id}")
        if self.state.mode == WorkbenchMode.CLOSED:
            return True

        await self._reload()
        if self._is_current(drafting):
            self._transition(Listing())
            self.notice = f"{action} itinerary for {payload.destination}"
            if record is None and self.error is None:
                self.error = "The itinerary was saved, but the service reply could not be read"
        return True

    async def delete(self, itinerary_id: int) -> bool:
        """Delete a saved itinerary after the traveler confirms."""
        self._require(WorkbenchMode.LISTING, WorkbenchMode.VIEWING)
        if itinerary_id in self._deleting:
            return False
        if not await _maybe_await(self._confirm(DELETE_CONFIRMATION)):
            logger.debug(f"Delete of itinerary {itinerary_id} not confirmed")
            return False

        self.clear_messages()
        self._deleting.add(itinerary_id)
        try:
            await self.gateway.delete(itinerary_id, self._token_provider())
        except WorkbenchError as e:
            if self.state.mode != WorkbenchMode.CLOSED:
                await self._fail(e)
            return False
        finally:
            self._deleting.discard(itinerary_id)

        logger.info(f"Deleted itinerary {itinerary_id}")
        if self.state.mode == WorkbenchMode.CLOSED:
            return True
        await self._reload()
        if isinstance(self.state, Viewing) and self.state.record.id == itinerary_id:
            self._transition(Listing())
        return True
