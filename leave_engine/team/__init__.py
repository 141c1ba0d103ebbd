"""Team, member and leave request inputs."""

from leave_engine.team.policy import LeavePolicy, resolve_policy
from leave_engine.team.schemas import (
    CarryoverSettings,
    LeaveRequest,
    Member,
    ParentalLeaveSettings,
    Team,
    TeamSettings,
)

__all__ = [
    "CarryoverSettings",
    "LeavePolicy",
    "LeaveRequest",
    "Member",
    "ParentalLeaveSettings",
    "Team",
    "TeamSettings",
    "resolve_policy",
]
