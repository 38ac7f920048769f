from __future__ import annotations

AUTH_EVENT_LOGIN = "login"
AUTH_EVENT_LOGOUT = "logout"

AUTH_REASON_MISSING_CODE = "missing_code"
AUTH_REASON_UNKNOWN_CODE = "unknown_code"
AUTH_REASON_INACTIVE_USER = "inactive_user"
AUTH_REASON_RATE_LIMITED = "rate_limited"

ADMIN_EVENT_PHASE_CREATE = "phase_create"
ADMIN_EVENT_PHASE_UPDATE = "phase_update"
ADMIN_EVENT_PHASE_DELETE = "phase_delete"
ADMIN_EVENT_USER_CREATE = "user_create"
ADMIN_EVENT_USER_UPDATE = "user_update"

ADMIN_REASON_DUPLICATE_CODE = "duplicate_code"
ADMIN_REASON_SELF_DEACTIVATION_BLOCKED = "self_deactivation_blocked"
