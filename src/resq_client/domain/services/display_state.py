"""Display state derivation for the SOS screen."""

from __future__ import annotations

from resq_client.domain.entities.incident_session import IncidentSession
from resq_client.domain.enums import DisplayState, GuardStatus, IncidentStatus


def derive_display_state(session: IncidentSession) -> DisplayState:
    """Pick the single card to show for ``session``.

    Precedence is Resolved > GuardAssigned > NoGuardAvailable > Searching.
    The raw fields can disagree (a stale NO_ASSIGNMENT next to a fresh
    assignment), so the order matters.
    """
    if session.status is IncidentStatus.RESOLVED:
        return DisplayState.RESOLVED
    if session.guard_assignment is not None:
        return DisplayState.GUARD_ASSIGNED
    if session.guard_status is GuardStatus.NO_ASSIGNMENT:
        return DisplayState.NO_GUARD_AVAILABLE
    return DisplayState.SEARCHING
