from __future__ import annotations

from typing import Protocol


class TaxonomyProvider(Protocol):
    def normalize_skill(self, raw: str) -> tuple[str, str | None]:
        """Return normalized text and optional canonical skill name."""

    def canonical_skill(self, raw: str) -> str:
        """Return the canonical skill name, or the normalized text when no synonym exists."""

    def family_order(self) -> list[str]:
        """Return all role family IDs in table order."""

    def role_families_for_title(self, title: str) -> list[str]:
        """Return role family IDs whose title markers appear in the title."""

    def role_families_for_skill(self, skill: str) -> list[str]:
        """Return role family IDs that list the skill as a marker."""

    def role_name(self, family_id: str) -> str | None:
        """Return the display role for a family ID."""

    def is_remote_friendly(self, family_id: str) -> bool:
        """Return True when roles in the family are commonly offered remotely."""

    def find_locations(self, text: str) -> list[str]:
        """Return known city names found in the text, in order of first appearance."""

    def region_for(self, location: str) -> str | None:
        """Return the region of the first known city or region alias in the location."""
