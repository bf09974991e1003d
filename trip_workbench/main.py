"""
Console entry point for the itinerary workbench.
"""
import asyncio
import logging
import shlex
from typing import Optional

from .config import settings, setup_logging
from .errors import WorkbenchError, InvalidTransition
from .models.itinerary import DayPlan, ItineraryRecord
from .models.session import Screen
from .models.workbench_state import Busy, WorkbenchMode
from .services.app_controller import AppController

logger = logging.getLogger(__name__)

HELP = """Commands:
  login <email> <password>      register <email> <password>
  show-register / show-login    logout
  list                          show <id>          close
  new                           edit <id>          cancel
  dest <destination...>         dates <YYYY-MM-DD> <YYYY-MM-DD>
  interest add [text...]        interest set <n> <text...>    interest rm <n>
  generate                      save               delete <id>
  help                          quit"""


def format_days(days: list[DayPlan]) -> list[str]:
    lines = []
    for day in days:
        lines.append(f"  Day {day.day}")
        for activity in day.activities:
            lines.append(f"    - {activity}")
    return lines


def format_record(record: ItineraryRecord, detailed: bool = False) -> str:
    info = record.to_display_dict()
    lines = [
        f"[{info['id']}] {info['destination']}",
        f"  Dates: {info['dates']}",
        f"  Duration: {info['days_count']} days",
        f"  Interests: {info['interests']}",
    ]
    if detailed:
        lines.extend(format_days(record.generated_itinerary))
    return "\n".join(lines)


class Console:
    """Line-oriented front end: one command in, rendered text out."""

    def __init__(self, controller: AppController):
        self.controller = controller
        self.running = True

    @property
    def workbench(self):
        return self.controller.workbench

    def _record(self, arg: str) -> ItineraryRecord:
        record = self.workbench.store.get(int(arg))
        if record is None:
            raise WorkbenchError(f"No itinerary with id {arg}")
        return record

    def render(self) -> str:
        """Describe the current screen."""
        session = self.controller.session
        if self.controller.screen != Screen.DASHBOARD or self.workbench is None:
            lines = [f"== {self.controller.screen.value.title()} =="]
            if session.notice:
                lines.append(session.notice)
            if session.error:
                lines.append(f"Error: {session.error}")
            return "\n".join(lines)

        wb = self.workbench
        lines = []
        if wb.mode == WorkbenchMode.LISTING:
            lines.append("== Your Travel Itineraries ==")
            if wb.store.loading:
                lines.append("Loading your itineraries...")
            elif not wb.records:
                lines.append("No itineraries yet. Type 'new' to create your first one.")
            lines.extend(format_record(r) for r in wb.records)
        elif wb.mode == WorkbenchMode.VIEWING:
            lines.append(format_record(wb.state.record, detailed=True))
        elif wb.mode == WorkbenchMode.DRAFTING:
            state = wb.state
            draft = state.draft
            title = "Edit Itinerary" if draft.is_editing else "Create New Itinerary"
            lines.append(f"== {title} ==")
            lines.append(f"  Destination: {draft.destination or '-'}")
            lines.append(f"  Dates: {draft.start_date or '-'} to {draft.end_date or '-'}")
            for index, interest in enumerate(draft.interests):
                lines.append(f"  Interest {index}: {interest or '(empty)'}")
            if state.busy == Busy.GENERATING:
                lines.append("Generating...")
            elif state.busy == Busy.SAVING:
                lines.append("Saving...")
            if state.preview is not None:
                lines.append(f"Preview: {state.preview.days_count} days")
                lines.extend(format_days(state.preview.itinerary))
        if wb.notice:
            lines.append(wb.notice)
        if wb.error:
            lines.append(f"Error: {wb.error}")
        return "\n".join(lines)

    async def handle(self, line: str) -> str:
        try:
            parts = shlex.split(line)
        except ValueError as e:
            return f"Error: {e}"
        if not parts:
            return ""
        command, args = parts[0].lower(), parts[1:]
        try:
            result = await self._dispatch(command, args)
        except (InvalidTransition, IndexError, ValueError) as e:
            return f"Not available here: {e}"
        except WorkbenchError as e:
            return f"Error: {e.message}"
        return result if result is not None else self.render()

    async def _dispatch(self, command: str, args: list[str]) -> Optional[str]:
        session = self.controller.session
        if command in ("quit", "exit"):
            self.running = False
            return "Goodbye!"
        if command == "help":
            return HELP
        if command == "login":
            await session.login(args[0], args[1])
            return None
        if command == "register":
            await session.register(args[0], args[1])
            return None
        if command == "show-register":
            await session.show_register()
            return None
        if command == "show-login":
            await session.show_login()
            return None
        if command == "logout":
            await session.logout()
            return None

        wb = self.workbench
        if wb is None:
            return "Please log in first."
        if command == "list":
            if wb.mode == WorkbenchMode.VIEWING:
                wb.close_view()
            await wb.refresh()
        elif command == "show":
            wb.select(self._record(args[0]))
        elif command == "close":
            wb.close_view()
        elif command == "new":
            wb.new()
        elif command == "edit":
            wb.edit(self._record(args[0]))
        elif command == "cancel":
            wb.cancel()
        elif command == "dest":
            wb.set_destination(" ".join(args))
        elif command == "dates":
            wb.set_dates(args[0], args[1])
        elif command == "interest":
            action, rest = args[0], args[1:]
            if action == "add":
                wb.add_interest(" ".join(rest))
            elif action == "set":
                wb.edit_interest(int(rest[0]), " ".join(rest[1:]))
            elif action == "rm":
                if not wb.remove_interest(int(rest[0])):
                    return "At least one interest field is kept."
            else:
                raise ValueError(f"unknown interest action {action!r}")
        elif command == "generate":
            if not wb.can_generate:
                return "Generation is already in progress."
            await wb.generate()
        elif command == "save":
            if not wb.can_save:
                busy = wb.drafting.busy if wb.drafting else Busy.NONE
                if busy == Busy.SAVING:
                    return "Save is already in progress."
                if busy == Busy.GENERATING:
                    return "Wait for generation to finish before saving."
                return "Generate an itinerary before saving."
            await wb.save()
        elif command == "delete":
            await wb.delete(int(args[0]))
        else:
            return f"Unknown command {command!r}. Type 'help'."
        return None


def _confirm(message: str) -> bool:
    return input(f"{message} [y/N] ").strip().lower() in ("y", "yes")


async def run():
    controller = AppController(confirm=_confirm)
    console = Console(controller)
    await controller.start()
    print("--- Travel Itinerary Generator ---")
    print(f"Service: {settings.api_base_url}. Type 'help' for commands.")
    print(console.render())
    while console.running:
        try:
            line = input("> ")
        except EOFError:
            break
        output = await console.handle(line)
        if output:
            print(output)


def main():
    setup_logging()
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
