from __future__ import annotations

from app.core.config import settings

_CORS_METHODS = ["GET", "POST", "OPTIONS"]


def cors_allowed_origins() -> list[str]:
    return [origin.rstrip("/") for origin in settings.cors_allowed_origins]


def cors_allow_origin_regex() -> str | None:
    regex = (settings.cors_allow_origin_regex or "").strip()
    return regex or None


def cors_middleware_options() -> dict:
    # Browsers reject a wildcard origin combined with credentials.
    origins = cors_allowed_origins()
    credentials = settings.cors_allow_credentials and "*" not in origins
    return {
        "allow_origins": origins,
        "allow_origin_regex": cors_allow_origin_regex(),
        "allow_credentials": credentials,
        "allow_methods": _CORS_METHODS,
        "allow_headers": ["*"],
    }
