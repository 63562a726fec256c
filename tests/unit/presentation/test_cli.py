"""Tests for the command line front end."""

import pytest
from rich.console import Console

from resq_client.core.config import Settings
from resq_client.domain.enums import DisplayState
from resq_client.infrastructure.http import IncidentApiClient, MockIncidentService, MockServiceConfig
from resq_client.presentation import cli


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, POLL_INTERVAL=0.01, POLL_MAX_BACKOFF=0.05, POLL_BACKOFF_JITTER=False)


@pytest.fixture
def console() -> Console:
    return Console(record=True, width=100, force_terminal=False)


class TestParser:
    def test_sos_command(self, settings: Settings) -> None:
        args = cli.build_parser(settings).parse_args(["sos", "--mock", "--no-ble", "--description", "Help"])

        assert args.command == "sos"
        assert args.mock and args.no_ble
        assert args.description == "Help"
        assert not args.no_input

    def test_status_command(self, settings: Settings) -> None:
        args = cli.build_parser(settings).parse_args(["--log-level", "DEBUG", "status", "abc123"])

        assert args.incident_id == "abc123"
        assert args.log_level == "DEBUG"

    def test_command_required(self, settings: Settings) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser(settings).parse_args([])


class TestBuilders:
    def test_build_incident_service(self, settings: Settings) -> None:
        assert isinstance(cli.build_incident_service(settings, mock=True), MockIncidentService)
        assert isinstance(cli.build_incident_service(settings), IncidentApiClient)

    def test_build_controller_without_ble(self, settings: Settings) -> None:
        controller = cli.build_controller(settings, MockIncidentService(), use_ble=False)

        assert controller.settings.poll_interval == 0.01


class TestRunSos:
    """Test the non-interactive SOS run against the scripted service."""

    async def test_runs_demo_to_resolution(self, settings: Settings, console: Console, monkeypatch) -> None:
        service = MockIncidentService(MockServiceConfig(simulate_delay=False))
        monkeypatch.setattr(cli, "build_incident_service", lambda settings, mock=False: service)

        code = await cli.run_sos(settings, console, description="Help", mock=True, use_ble=False, interactive=False)

        output = console.export_text()
        assert code == 0
        assert "SOS sent" in output
        assert "Searching for a guard" in output
        assert "J. Rao" in output
        assert "Resolved" in output
        assert service.submit_calls == 1

    async def test_failed_submission_exit_code(self, settings: Settings, console: Console, monkeypatch) -> None:
        service = MockIncidentService(MockServiceConfig(simulate_delay=False))
        service.fail_next_submission()
        monkeypatch.setattr(cli, "build_incident_service", lambda settings, mock=False: service)

        code = await cli.run_sos(settings, console, description=None, mock=True, use_ble=False, interactive=False)

        assert code == 1
        assert "SOS not sent" in console.export_text()


class TestSessionRenderer:
    async def test_render_is_deduplicated(self, settings: Settings, console: Console) -> None:
        service = MockIncidentService(MockServiceConfig(simulate_delay=False), script=[])
        controller = cli.build_controller(settings, service, use_ble=False)
        renderer = cli.SessionRenderer(console, controller)

        await controller.start_session()
        renderer.render(DisplayState.SEARCHING)
        renderer.render(DisplayState.SEARCHING)
        await controller.close()

        assert console.export_text().count("Searching for a guard") == 1
