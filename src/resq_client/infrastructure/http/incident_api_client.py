"""HTTP client for the remote incident service."""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from resq_client.application.dtos.incident_dtos import (
    IncidentDetailResponse,
    RatingRequest,
    ReportSOSRequest,
    ReportSOSResponse,
    StatusPollResponse,
)
from resq_client.application.interfaces.incident_service_interface import IncidentServiceInterface
from resq_client.core.config.session_settings import ApiSettings
from resq_client.core.exceptions.infrastructure import (
    BadRequestError,
    ForbiddenError,
    IncidentServiceError,
    NetworkError,
    NotFoundError,
    ParseError,
    ServerError,
    UnauthorizedError,
)

from .auth import AuthContext

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class IncidentApiClient(IncidentServiceInterface):
    """httpx-based implementation of the incident service port."""

    def __init__(
        self,
        config: ApiSettings | None = None,
        auth: AuthContext | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the API client.

        Args:
            config: Base URL, timeout and rating behaviour
            auth: Token holder; defaults to the token in ``config``
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.config = config or ApiSettings()
        self.auth = auth or AuthContext(token=self.config.token)
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=httpx.Timeout(self.config.timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def submit_incident(self, request: ReportSOSRequest) -> ReportSOSResponse:
        logger.info("Submitting SOS", beacon_id=request.beacon_id)
        data = await self._request("POST", "/incidents/report_sos/", json=request.model_dump(exclude_none=True))
        return self._parse(ReportSOSResponse, data)

    async def poll_status(self, incident_id: str) -> StatusPollResponse:
        data = await self._request("GET", f"/incidents/{incident_id}/status_poll/")
        return self._parse(StatusPollResponse, data)

    async def submit_rating(self, incident_id: str, request: RatingRequest) -> None:
        if not self.config.rating_endpoint_enabled:
            logger.info(
                "Rating acknowledged locally",
                incident_id=incident_id,
                rating=request.rating,
                has_feedback=bool(request.feedback),
            )
            return
        await self._request("POST", f"/incidents/{incident_id}/rating/", json=request.model_dump(exclude_none=True))

    async def get_incident(self, incident_id: str) -> IncidentDetailResponse:
        data = await self._request("GET", f"/incidents/{incident_id}/")
        return self._parse(IncidentDetailResponse, data)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Make an authenticated call and map failures onto the error taxonomy.

        Raises:
            NetworkError: If the service cannot be reached
            ParseError: If the body is not JSON
            IncidentServiceError: For any non-2xx status
        """
        try:
            response = await self._client.request(method, path, headers=self.auth.authorization_header(), **kwargs)
        except httpx.HTTPError as e:
            raise NetworkError("Network error. Please check your connection.", status_code=0, detail=str(e)) from e

        try:
            data = response.json() if response.content else {}
        except ValueError as e:
            if response.is_success:
                raise ParseError(
                    "Invalid server response. Please try again.",
                    status_code=response.status_code,
                    detail=str(e),
                ) from e
            data = {"detail": response.text}

        if response.is_success:
            return data

        raise self._error_for(response.status_code, data)

    def _error_for(self, status_code: int, data: Any) -> IncidentServiceError:
        detail = data.get("detail", data) if isinstance(data, dict) else data

        if status_code == 400:
            return BadRequestError("Invalid request. Please check your input.", status_code, detail)
        if status_code == 401:
            self.auth.clear()
            return UnauthorizedError("Session expired. Please login again.", status_code, detail)
        if status_code == 403:
            return ForbiddenError("You do not have permission to perform this action.", status_code, detail)
        if status_code == 404:
            return NotFoundError("Resource not found.", status_code, detail)
        if status_code >= 500:
            return ServerError("Server error. Please try again later.", status_code, detail)
        return IncidentServiceError(str(detail) if detail else "An error occurred", status_code, detail)

    @staticmethod
    def _parse(model: type[ModelT], data: Any) -> ModelT:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ParseError("Invalid server response. Please try again.", detail=str(e)) from e

    async def close(self) -> None:
        """Close HTTP client connections."""
        await self._client.aclose()
