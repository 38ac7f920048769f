from timesheets.services.phase_service import seed_work_phases
from timesheets.services.report_service import (
    DashboardStats,
    EmployeeTotals,
    PhaseTotal,
    dashboard_stats,
    employee_hours,
)
from timesheets.services.timesheet_service import (
    DuplicateTimesheetError,
    InvalidTimesheetError,
    TimesheetError,
    create_timesheet,
    update_timesheet,
)
from timesheets.services.user_service import DuplicateAccessCodeError, create_user

__all__ = [
    "DashboardStats",
    "DuplicateAccessCodeError",
    "DuplicateTimesheetError",
    "EmployeeTotals",
    "InvalidTimesheetError",
    "PhaseTotal",
    "TimesheetError",
    "create_timesheet",
    "create_user",
    "dashboard_stats",
    "employee_hours",
    "seed_work_phases",
    "update_timesheet",
]
