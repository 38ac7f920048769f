from __future__ import annotations

from fastapi import Request

from timesheets.rate_limit import RateLimitRule, consume_rate_limit, is_rate_limited
from timesheets.settings import Settings, get_settings


def client_ip(request: Request) -> str:
    settings = get_settings()
    if settings.trust_proxy_headers:
        real_ip = request.headers.get("x-real-ip", "").strip()
        if real_ip:
            return real_ip

        forwarded = request.headers.get("x-forwarded-for", "")
        if forwarded:
            forwarded_ip = forwarded.split(",", 1)[0].strip()
            if forwarded_ip:
                return forwarded_ip

    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"


def _login_rules(settings: Settings) -> tuple[RateLimitRule, RateLimitRule]:
    return (
        RateLimitRule(
            bucket="login-ip",
            max_attempts=settings.login_rate_limit_ip_attempts,
            window_seconds=settings.login_rate_limit_ip_window_seconds,
        ),
        RateLimitRule(
            bucket="login-code",
            max_attempts=settings.login_rate_limit_code_attempts,
            window_seconds=settings.login_rate_limit_code_window_seconds,
        ),
    )


def is_login_rate_limited(request: Request, normalized_code: str) -> bool:
    settings = get_settings()
    if not settings.auth_rate_limit_enabled:
        return False

    ip_rule, code_rule = _login_rules(settings)
    ip_limited = is_rate_limited(ip_rule, client_ip(request))
    code_limited = is_rate_limited(code_rule, normalized_code)
    return ip_limited or code_limited


def record_login_failure(request: Request, normalized_code: str) -> None:
    settings = get_settings()
    if not settings.auth_rate_limit_enabled:
        return

    ip_rule, code_rule = _login_rules(settings)
    _ = consume_rate_limit(ip_rule, client_ip(request))
    _ = consume_rate_limit(code_rule, normalized_code)
