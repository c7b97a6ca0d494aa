from .normalize_profile import (
    MalformedDraftProfile,
    degraded_profile,
    normalize_profile,
    profile_as_draft,
)

__all__ = ["MalformedDraftProfile", "degraded_profile", "normalize_profile", "profile_as_draft"]
