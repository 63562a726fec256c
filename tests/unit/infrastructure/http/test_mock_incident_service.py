"""Tests for the scripted in-memory incident service."""

import pytest

from resq_client.application.dtos.incident_dtos import RatingRequest, ReportSOSRequest
from resq_client.core.exceptions import BadRequestError, NotFoundError, ServerError
from resq_client.domain.enums import IncidentStatus
from resq_client.infrastructure.http import DEMO_SCRIPT, MockIncidentService, MockServiceConfig

from ....fixtures.test_data import FALLBACK_ID


@pytest.fixture
def service() -> MockIncidentService:
    return MockIncidentService(MockServiceConfig(simulate_delay=False))


class TestMockIncidentService:
    """Test the mock service behaviour used by the CLI demo."""

    async def test_submit_records_incident(self, service: MockIncidentService) -> None:
        response = await service.submit_incident(ReportSOSRequest(beacon_id=FALLBACK_ID, description="Help"))

        assert response.resolved_incident_id in service.incidents
        assert response.location_name == "Campus Beacon"
        assert service.submit_calls == 1

    async def test_demo_script_ends_resolved(self, service: MockIncidentService) -> None:
        """Test the default script walks through to RESOLVED and then repeats it."""
        statuses = [(await service.poll_status("x")).status for _ in range(len(DEMO_SCRIPT) + 2)]

        assert statuses[0] is IncidentStatus.CREATED
        assert statuses[-1] is IncidentStatus.RESOLVED
        assert statuses[-2] is IncidentStatus.RESOLVED
        assert service.poll_calls == len(DEMO_SCRIPT) + 2

    async def test_injected_failures(self, service: MockIncidentService) -> None:
        service.fail_next_submission(BadRequestError("bad", status_code=400))
        service.fail_next_polls(2)

        with pytest.raises(BadRequestError):
            await service.submit_incident(ReportSOSRequest(beacon_id=FALLBACK_ID))
        for _ in range(2):
            with pytest.raises(ServerError):
                await service.poll_status("x")

        await service.submit_incident(ReportSOSRequest(beacon_id=FALLBACK_ID))
        await service.poll_status("x")

    async def test_ratings_and_detail(self, service: MockIncidentService) -> None:
        response = await service.submit_incident(ReportSOSRequest(beacon_id=FALLBACK_ID, description="Help"))
        incident_id = response.resolved_incident_id

        await service.submit_rating(incident_id, RatingRequest(rating=5))
        detail = await service.get_incident(incident_id)

        assert service.ratings[incident_id].rating == 5
        assert detail.description == "Help"
        with pytest.raises(NotFoundError):
            await service.get_incident("missing")
