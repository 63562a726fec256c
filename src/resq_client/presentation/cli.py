"""Command line front end for the SOS flow.

Usage:
    resq-sos sos                         # Trigger an SOS against the configured server
    resq-sos sos --mock                  # Run against the scripted in-memory service
    resq-sos sos --description "..."     # Attach a description
    resq-sos status INCIDENT_ID          # Show an incident
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import structlog
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from ..application.interfaces.incident_service_interface import IncidentServiceInterface
from ..application.use_cases.incident_session_controller import IncidentSessionController
from ..core.config import LogLevel, Settings, get_settings, setup_logging
from ..core.exceptions import IncidentServiceError, SubmissionFailure
from ..domain.enums import DisplayState
from ..domain.events import DomainEvent, IncidentResolved, PollFailed, SessionUpdated
from ..infrastructure.ble import BeaconResolver, BleakProximityScanner
from ..infrastructure.http import IncidentApiClient, MockIncidentService, MockServiceConfig
from ..infrastructure.location import position_provider_from_settings

logger = structlog.get_logger(__name__)


def build_incident_service(settings: Settings, mock: bool = False) -> IncidentServiceInterface:
    """Create the remote service adapter."""
    if mock:
        return MockIncidentService(MockServiceConfig(simulate_delay=True))
    return IncidentApiClient(settings.api_config)


def build_controller(
    settings: Settings,
    incident_service: IncidentServiceInterface,
    use_ble: bool = True,
) -> IncidentSessionController:
    """Wire a session controller from settings."""
    scan_config = settings.scan_config
    resolver = BeaconResolver(BleakProximityScanner() if use_ble else None, scan_config)
    return IncidentSessionController(
        incident_service=incident_service,
        beacon_source=resolver,
        position_provider=position_provider_from_settings(settings.DEFAULT_LATITUDE, settings.DEFAULT_LONGITUDE),
        settings=settings.session_config,
        scan_timeout=scan_config.timeout,
    )


class SessionRenderer:
    """Prints one panel per display state change."""

    def __init__(self, console: Console, controller: IncidentSessionController):
        self.console = console
        self.controller = controller
        self.resolved = asyncio.Event()
        self.no_guard = asyncio.Event()
        self._last_display: DisplayState | None = None

    def on_event(self, event: DomainEvent) -> None:
        if isinstance(event, PollFailed) and event.consecutive_failures == 1:
            self.console.print("[yellow]Connection hiccup, still trying...[/yellow]")
        elif isinstance(event, SessionUpdated):
            self.render(event.display_state)
        elif isinstance(event, IncidentResolved):
            self.render(DisplayState.RESOLVED)
            self.resolved.set()

    def render(self, display: DisplayState) -> None:
        session = self.controller.session
        if session is None or display is self._last_display:
            return
        self._last_display = display

        if display is DisplayState.RESOLVED:
            guard = session.guard_assignment
            thanks = f"\nThank you for trusting {guard.name}." if guard else ""
            self.console.print(Panel(f"{session.status.description}{thanks}", title="Resolved", border_style="green"))
        elif display is DisplayState.GUARD_ASSIGNED:
            guard = session.guard_assignment
            lines = [f"[bold]{guard.name}[/bold] is on the way to {session.location_label}."]
            if guard.contact_phone:
                lines.append(f"Call: {guard.contact_phone} ({guard.dial_uri})")
            if guard.contact_channel:
                lines.append(f"Contact: {guard.contact_channel}")
            if session.priority:
                lines.append(f"Priority: {session.priority}")
            self.console.print(Panel("\n".join(lines), title="Guard assigned", border_style="blue"))
        elif display is DisplayState.NO_GUARD_AVAILABLE:
            message = session.status_message or "No guard is available right now."
            self.console.print(Panel(message, title="No guard available", border_style="red"))
            self.no_guard.set()
        else:
            message = session.status_message or session.status.description
            self.console.print(
                Panel(
                    f"{message}\nAlerted guards: {session.pending_alert_count}\nLocation: {session.location_label}",
                    title="Searching for a guard",
                    border_style="yellow",
                )
            )

    def reset(self) -> None:
        self._last_display = None
        self.no_guard.clear()


async def _ask(prompt_fn, *args, **kwargs):
    return await asyncio.to_thread(prompt_fn, *args, **kwargs)


async def run_sos(settings: Settings, console: Console, description: str | None, mock: bool, use_ble: bool, interactive: bool) -> int:
    """Run one SOS session to completion. Returns a process exit code."""
    service = build_incident_service(settings, mock=mock)
    controller = build_controller(settings, service, use_ble=use_ble)
    renderer = SessionRenderer(console, controller)
    controller.subscribe(renderer.on_event)

    try:
        session = None
        while session is None:
            try:
                with console.status("Sending SOS alert... (detecting nearest beacon)"):
                    if controller.last_error is None:
                        session = await controller.start_session(description)
                    else:
                        session = await controller.retry_submission()
            except SubmissionFailure as e:
                console.print(Panel(f"{e.message}\n({e.error_type})", title="SOS not sent", border_style="red"))
                if not interactive or not await _ask(Confirm.ask, "Retry sending the SOS?", default=True):
                    return 1
            if session is None and controller.last_error is None:
                return 1

        console.print(f"[bold red]SOS sent[/bold red] incident={session.incident_id} beacon={session.beacon.display_name}")
        renderer.render(controller.display_state or DisplayState.SEARCHING)

        while not renderer.resolved.is_set():
            resolved = asyncio.create_task(renderer.resolved.wait())
            no_guard = asyncio.create_task(renderer.no_guard.wait())
            await asyncio.wait({resolved, no_guard}, return_when=asyncio.FIRST_COMPLETED)
            for task in (resolved, no_guard):
                task.cancel()

            if renderer.resolved.is_set():
                break
            if interactive and await _ask(Confirm.ask, "Retry finding a guard?", default=True):
                renderer.reset()
                controller.retry_search()
            elif interactive:
                controller.cancel()
                console.print("SOS cancelled.")
                return 1
            else:
                renderer.no_guard.clear()

        if interactive and controller.awaiting_rating:
            rating = await _ask(IntPrompt.ask, "Rate the response (0-5)", choices=[str(i) for i in range(6)], default=5)
            feedback = await _ask(Prompt.ask, "Feedback (optional)", default="")
            await controller.submit_rating(rating, feedback or None)
            console.print("Thank you for your feedback!")

        controller.dismiss()
        return 0
    finally:
        await controller.close()
        await service.close()


async def run_status(settings: Settings, console: Console, incident_id: str) -> int:
    """Print one incident."""
    service = IncidentApiClient(settings.api_config)
    try:
        detail = await service.get_incident(incident_id)
    except IncidentServiceError as e:
        console.print(f"[red]{e.message}[/red] ({e.error_code})")
        return 1
    finally:
        await service.close()

    table = Table(title=f"Incident {detail.id}")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Status", f"{detail.status.value} - {detail.status.description}")
    table.add_row("Location", (detail.beacon.location_name if detail.beacon else None) or "-")
    table.add_row("Reported", detail.created_at or "-")
    table.add_row("Description", detail.description or "-")
    console.print(table)
    return 0


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="resq-sos", description="Campus SOS client")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.LOG_LEVEL.value,
        help=f"Set log level (default: {settings.LOG_LEVEL.value})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sos = subparsers.add_parser("sos", help="Send an SOS and follow it until resolved")
    sos.add_argument("--description", default=None, help="What is happening")
    sos.add_argument("--mock", action="store_true", help="Use the scripted in-memory incident service")
    sos.add_argument("--no-ble", action="store_true", help="Skip the beacon scan and use the fallback beacon")
    sos.add_argument("--no-input", action="store_true", help="Never prompt; skip retries and rating")

    status = subparsers.add_parser("status", help="Show an incident")
    status.add_argument("incident_id")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)

    setup_logging(settings.logging_config.model_copy(update={"level": LogLevel(args.log_level)}))
    console = Console()

    try:
        if args.command == "status":
            return asyncio.run(run_status(settings, console, args.incident_id))
        return asyncio.run(
            run_sos(
                settings,
                console,
                description=args.description,
                mock=args.mock,
                use_ble=not args.no_ble,
                interactive=not args.no_input,
            )
        )
    except KeyboardInterrupt:
        logger.info("SOS interrupted by user")
        console.print("\nSOS cancelled.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
