"""Repository layer.

These repositories encapsulate common query patterns for the app's entities.
Keep them focused on persistence/query shaping; business logic lives in services.
"""

from timesheets.db.repos.timesheets import TimesheetRepository
from timesheets.db.repos.users import UserRepository
from timesheets.db.repos.work_phases import WorkPhaseRepository

__all__ = [
    "TimesheetRepository",
    "UserRepository",
    "WorkPhaseRepository",
]
