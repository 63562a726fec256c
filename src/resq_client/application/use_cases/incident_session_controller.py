"""Incident session controller: SOS submission and guard-status polling."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

import structlog

from ...core.config.session_settings import SessionSettings
from ...core.exceptions import (
    IncidentServiceError,
    InvalidSessionTransitionError,
    PollFailure,
    RatingSubmissionFailure,
    SessionClosedError,
    SubmissionFailure,
    ValidationError,
)
from ...domain.entities.incident_session import IncidentSession, StatusUpdate
from ...domain.enums import DisplayState, SessionState
from ...domain.events import (
    DomainEvent,
    GuardAssigned,
    IncidentResolved,
    PollFailed,
    RatingSubmitted,
    SessionStateChanged,
    SessionUpdated,
    SubmissionFailed,
)
from ...domain.services.display_state import derive_display_state
from ...domain.value_objects import BeaconSignal, GeoPosition
from ...infrastructure.resilience.backoff import BackoffPolicy
from ...infrastructure.scheduling.poll_scheduler import PollOutcome, PollScheduler
from ..dtos.incident_dtos import RatingRequest, ReportSOSRequest
from ..interfaces.beacon_source import BeaconSource
from ..interfaces.incident_service_interface import IncidentServiceInterface
from ..interfaces.position_provider import PositionProvider

logger = structlog.get_logger(__name__)

SessionListener = Callable[[DomainEvent], None]


class IncidentSessionController:
    """Drives one SOS incident from trigger to resolution.

    States: IDLE -> INITIALIZING -> ACTIVE -> RESOLVED, with ERROR reachable
    only from INITIALIZING when the submission fails. The server owns the
    incident status; the controller only mirrors poll results into its
    :class:`IncidentSession` and decides when to stop polling.

    The submission is guarded by a one-shot latch (the start task), set
    before the first await, so repeated ``start_session`` calls share a
    single network submission.
    """

    def __init__(
        self,
        incident_service: IncidentServiceInterface,
        beacon_source: BeaconSource,
        position_provider: PositionProvider | None = None,
        settings: SessionSettings | None = None,
        scan_timeout: float | None = None,
    ):
        """Initialize the controller.

        Args:
            incident_service: Remote incident service
            beacon_source: Beacon resolver used before submission
            position_provider: Optional best-effort position source
            settings: Poll cadence and backoff bounds
            scan_timeout: Beacon scan window in seconds; resolver default when omitted
        """
        self.settings = settings or SessionSettings()
        self._service = incident_service
        self._beacon_source = beacon_source
        self._position_provider = position_provider
        self._scan_timeout = scan_timeout

        self._scheduler = PollScheduler(
            self._poll_tick,
            BackoffPolicy(
                base_delay=self.settings.poll_interval,
                max_delay=self.settings.max_backoff,
                multiplier=self.settings.backoff_multiplier,
                jitter=self.settings.backoff_jitter,
            ),
            name="incident-poll",
        )

        self._state = SessionState.IDLE
        self._session: IncidentSession | None = None
        self._last_error: SubmissionFailure | None = None
        self._start_task: asyncio.Task[IncidentSession | None] | None = None
        self._generation = 0
        self._session_key = uuid4().hex
        self._description: str | None = None
        self._listeners: list[SessionListener] = []

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> IncidentSession | None:
        return self._session

    @property
    def last_error(self) -> SubmissionFailure | None:
        return self._last_error

    @property
    def is_polling(self) -> bool:
        return self._scheduler.is_running

    @property
    def display_state(self) -> DisplayState | None:
        """Card to render, or ``None`` while there is no incident yet."""
        if self._session is None:
            return None
        return derive_display_state(self._session)

    @property
    def awaiting_rating(self) -> bool:
        return self._state is SessionState.RESOLVED and self._session is not None and self._session.rating is None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register an observer for session events. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def start_session(self, description: str | None = None) -> IncidentSession | None:
        """Locate, submit the SOS once, and start polling.

        Re-entrant calls share the first call's outcome. Returns ``None`` if
        the session was cancelled before the submission completed.

        Raises:
            SubmissionFailure: If the incident could not be submitted
            InvalidSessionTransitionError: If called outside IDLE with no start in flight
        """
        if self._start_task is None:
            if self._state is not SessionState.IDLE:
                raise InvalidSessionTransitionError(
                    f"Cannot start a session from state {self._state.value}",
                    details={"state": self._state.value},
                )
            self._begin(description)
        else:
            logger.debug("Start requested while a session exists, reusing it", state=self._state.value)

        return await self._await_start(self._start_task)

    def _begin(self, description: str | None) -> None:
        self._description = description
        self._transition(SessionState.INITIALIZING)
        self._start_task = asyncio.get_running_loop().create_task(
            self._initialize(description, self._generation), name="incident-session-start"
        )

    async def _await_start(self, task: asyncio.Task[IncidentSession | None]) -> IncidentSession | None:
        # A start task cancelled by cancel() resolves to None for its callers.
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if task.cancelled() and (current is None or not current.cancelling()):
                return None
            raise

    async def _initialize(self, description: str | None, generation: int) -> IncidentSession | None:
        if generation != self._generation:
            return None

        position = await self._acquire_position()
        if generation != self._generation:
            return None

        beacon = await self._beacon_source.scan(self._scan_timeout)
        if generation != self._generation:
            return None

        request = ReportSOSRequest(
            beacon_id=beacon.identifier,
            description=description or self._default_description(),
            latitude=position.latitude if position else None,
            longitude=position.longitude if position else None,
        )

        try:
            response = await self._service.submit_incident(request)
        except IncidentServiceError as e:
            raise self._submission_failed(
                generation,
                SubmissionFailure(e.message, error_type=e.error_code, status_code=e.status_code, details=e.details),
            ) from e
        except Exception as e:
            raise self._submission_failed(generation, SubmissionFailure(f"Failed to send SOS alert: {e}")) from e

        if generation != self._generation:
            logger.warning(
                "SOS submitted after the session was cancelled, ignoring response",
                incident_id=response.resolved_incident_id,
            )
            return None

        incident_id = response.resolved_incident_id
        if not incident_id:
            raise self._submission_failed(
                generation,
                SubmissionFailure("No incident ID received from server", error_type="PARSE_ERROR"),
            )

        session = IncidentSession(
            incident_id=incident_id,
            beacon=beacon,
            status=response.initial_status,
            location_label=response.location_name or self._location_label(beacon),
            position=position,
        )
        self._session = session
        self._last_error = None
        logger.info(
            "SOS submitted",
            incident_id=incident_id,
            status=session.status.value,
            beacon_id=beacon.identifier,
            beacon_origin=beacon.origin.value,
        )

        if session.is_resolved:
            self._resolve(session)
        else:
            self._transition(SessionState.ACTIVE)
            self._scheduler.start()

        return session

    def _submission_failed(self, generation: int, failure: SubmissionFailure) -> SubmissionFailure:
        logger.error("SOS submission failed", error=failure.message, error_type=failure.error_type)
        if generation == self._generation:
            self._last_error = failure
            self._transition(SessionState.ERROR)
            self._emit(
                SubmissionFailed.create(
                    self._session_key,
                    error_message=failure.message,
                    error_type=failure.error_type,
                )
            )
        return failure

    async def _acquire_position(self) -> GeoPosition | None:
        if self._position_provider is None:
            return None
        try:
            return await self._position_provider.current_position()
        except Exception as e:
            logger.warning("Could not determine position, continuing without it", error=str(e))
            return None

    def _default_description(self) -> str:
        return self.settings.default_description.format(timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"))

    def _location_label(self, beacon: BeaconSignal) -> str:
        return self.settings.location_placeholder if beacon.is_fallback else beacon.display_name

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def poll_once(self) -> PollOutcome:
        """Run one poll immediately, outside the timer cadence."""
        return await self._poll_tick()

    async def _poll_tick(self) -> PollOutcome:
        session = self._session
        if session is None or self._state is not SessionState.ACTIVE:
            return PollOutcome.DONE

        try:
            response = await self._service.poll_status(session.incident_id)
            update = response.to_status_update()
        except Exception as e:
            if not self._is_current(session):
                return PollOutcome.DONE
            failure = PollFailure(str(e), session.incident_id, self._scheduler.consecutive_failures + 1)
            logger.warning(
                "Status poll failed, will keep polling",
                incident_id=session.incident_id,
                error=str(e),
                consecutive_failures=failure.consecutive_failures,
            )
            self._emit(
                PollFailed.create(
                    session.incident_id,
                    error_message=failure.message,
                    error_type=getattr(e, "error_code", type(e).__name__),
                    consecutive_failures=failure.consecutive_failures,
                )
            )
            return PollOutcome.FAILED

        if not self._is_current(session):
            logger.debug("Ignoring poll response for an inactive session", incident_id=session.incident_id)
            return PollOutcome.DONE

        return self._apply(session, update)

    def _is_current(self, session: IncidentSession) -> bool:
        return self._session is session and self._state is SessionState.ACTIVE

    def _apply(self, session: IncidentSession, update: StatusUpdate) -> PollOutcome:
        try:
            changes = session.apply_status_update(update)
        except SessionClosedError:
            return PollOutcome.DONE

        display = derive_display_state(session)
        logger.debug(
            "Poll merged",
            incident_id=session.incident_id,
            status=session.status.value,
            display_state=display.value,
            fields=changes.fields,
        )
        self._emit(SessionUpdated.create(session.incident_id, display_state=display, changed_fields=changes.fields))

        if changes.guard_newly_assigned and session.guard_assignment is not None:
            self._emit(
                GuardAssigned.create(
                    session.incident_id,
                    guard_name=session.guard_assignment.name,
                    contact_phone=session.guard_assignment.contact_phone,
                )
            )

        if changes.resolved:
            self._resolve(session)
            return PollOutcome.DONE

        return PollOutcome.CONTINUE

    def _resolve(self, session: IncidentSession) -> None:
        self._scheduler.stop()
        self._transition(SessionState.RESOLVED)
        logger.info("Incident resolved, polling stopped", incident_id=session.incident_id)
        self._emit(
            IncidentResolved.create(
                session.incident_id,
                guard_name=session.guard_assignment.name if session.guard_assignment else None,
            )
        )

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def cancel(self) -> None:
        """Abandon the session locally. The server is not notified."""
        if self._state is SessionState.IDLE and self._start_task is None:
            return

        self._scheduler.stop()
        self._generation += 1
        if self._start_task is not None and not self._start_task.done():
            self._start_task.cancel()
        self._start_task = None
        incident_id = self._session.incident_id if self._session else None
        self._session = None
        self._last_error = None
        self._description = None
        logger.info("Session cancelled", incident_id=incident_id)
        self._transition(SessionState.IDLE)
        self._session_key = uuid4().hex

    def dismiss(self) -> None:
        """Close a resolved session after the rating view."""
        if self._state is not SessionState.RESOLVED:
            raise InvalidSessionTransitionError("Only a resolved session can be dismissed", details={"state": self._state.value})
        self.cancel()

    def retry_search(self) -> None:
        """Search for a guard again for the existing incident.

        Clears the last guard status, message and pending alerts (a standing
        assignment is kept) and restarts the poll loop.

        Raises:
            InvalidSessionTransitionError: If there is no open incident to search for
        """
        session = self._session
        if session is None or session.is_resolved or self._state not in (SessionState.ACTIVE, SessionState.ERROR):
            raise InvalidSessionTransitionError(
                "Retry search needs an open incident",
                details={"state": self._state.value},
            )

        self._scheduler.stop()
        session.reset_guard_search()
        if self._state is SessionState.ERROR:
            self._transition(SessionState.INITIALIZING)
        self._last_error = None
        self._transition(SessionState.ACTIVE)
        self._scheduler.start()
        logger.info("Retrying guard search", incident_id=session.incident_id)

    async def retry_submission(self) -> IncidentSession | None:
        """Run the whole start sequence again after a failed submission.

        Raises:
            InvalidSessionTransitionError: If not in ERROR or an incident already exists
            SubmissionFailure: If the new submission fails too
        """
        task = self._start_task
        if task is not None and not task.done():
            logger.debug("Retry requested while a submission is in flight, reusing it")
            return await self._await_start(task)

        if self._state is not SessionState.ERROR or self._session is not None:
            raise InvalidSessionTransitionError(
                "Retry submission is only possible after a failed submission",
                details={"state": self._state.value},
            )

        self._last_error = None
        self._begin(self._description)
        return await self._await_start(self._start_task)

    async def retry(self) -> IncidentSession | None:
        """Retry whatever failed: the guard search if an incident exists, the submission otherwise."""
        if self._session is not None:
            self.retry_search()
            return self._session
        return await self.retry_submission()

    async def submit_rating(self, rating: int, feedback: str | None = None) -> bool:
        """Rate a resolved incident. Delivery is best effort.

        Returns:
            True if the service accepted the rating

        Raises:
            InvalidSessionTransitionError: If the session is not resolved
            ValidationError: If the rating is outside 0..5
        """
        session = self._session
        if session is None or self._state is not SessionState.RESOLVED:
            raise InvalidSessionTransitionError("Only a resolved incident can be rated", details={"state": self._state.value})
        if not 0 <= rating <= 5:
            raise ValidationError("Rating must be between 0 and 5 stars", details={"rating": rating})

        feedback = feedback.strip() if feedback and feedback.strip() else None
        session.rating = rating
        session.feedback = feedback

        delivered = True
        try:
            await self._service.submit_rating(session.incident_id, RatingRequest(rating=rating, feedback=feedback))
        except Exception as e:
            failure = RatingSubmissionFailure(f"Rating not delivered: {e}", details={"incident_id": session.incident_id})
            logger.info("Rating submission failed", incident_id=session.incident_id, error_code=failure.error_code, error=str(e))
            delivered = False

        self._emit(RatingSubmitted.create(session.incident_id, rating=rating, feedback=feedback, delivered=delivered))
        return delivered

    async def close(self) -> None:
        """Tear down: stop polling and drop the session."""
        self.cancel()
        await asyncio.sleep(0)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transition(self, new_state: SessionState) -> None:
        previous = self._state
        if previous is new_state:
            return
        self._state = new_state
        aggregate_id = self._session.incident_id if self._session else self._session_key
        logger.info("Session state changed", previous=previous.value, state=new_state.value, aggregate_id=aggregate_id)
        self._emit(SessionStateChanged.create(aggregate_id, previous_state=previous, new_state=new_state))

    def _emit(self, event: DomainEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.exception("Session listener failed", event_type=type(event).__name__, error=str(e))
