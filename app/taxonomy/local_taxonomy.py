from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .provider import TaxonomyProvider

_DATA_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class RoleFamily:
    family_id: str
    role: str
    remote_friendly: bool
    title_markers: tuple[str, ...]
    skill_markers: tuple[str, ...]


def _normalize_text(value: str) -> str:
    return re.sub(r"\s+", " ", (value or "").strip().lower())


def _phrase_pattern(phrase: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![a-z0-9]){re.escape(phrase)}(?![a-z0-9])")


def _load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


class LocalTaxonomy(TaxonomyProvider):
    def __init__(
        self,
        synonyms_path: str | Path | None = None,
        role_families_path: str | Path | None = None,
        locations_path: str | Path | None = None,
    ) -> None:
        self._synonyms = self._load_synonyms(Path(synonyms_path) if synonyms_path else _DATA_DIR / "synonyms.json")
        self._families = self._load_families(
            Path(role_families_path) if role_families_path else _DATA_DIR / "role_families.json"
        )
        self._families_by_id = {family.family_id: family for family in self._families}
        cities, aliases = self._load_locations(Path(locations_path) if locations_path else _DATA_DIR / "locations.json")
        self._cities = cities
        self._region_aliases = aliases
        self._regions = sorted({region for region in cities.values()}, key=str.lower)
        self._patterns: dict[str, re.Pattern[str]] = {}

    @staticmethod
    def _load_synonyms(path: Path) -> dict[str, str]:
        raw = _load_json(path)
        return {_normalize_text(str(key)): _normalize_text(str(value)) for key, value in raw.items()}

    @staticmethod
    def _load_families(path: Path) -> tuple[RoleFamily, ...]:
        raw = _load_json(path)
        families: list[RoleFamily] = []
        for item in raw.get("families", []):
            families.append(
                RoleFamily(
                    family_id=str(item["id"]),
                    role=str(item["role"]),
                    remote_friendly=bool(item.get("remote_friendly", False)),
                    title_markers=tuple(_normalize_text(str(marker)) for marker in item.get("title_markers", [])),
                    skill_markers=tuple(_normalize_text(str(marker)) for marker in item.get("skill_markers", [])),
                )
            )
        return tuple(families)

    @staticmethod
    def _load_locations(path: Path) -> tuple[dict[str, str], dict[str, str]]:
        raw = _load_json(path)
        cities = {str(city): str(region) for city, region in raw.get("cities", {}).items()}
        aliases = {_normalize_text(str(alias)): str(region) for alias, region in raw.get("region_aliases", {}).items()}
        return cities, aliases

    def _contains(self, text: str, phrase: str) -> re.Match[str] | None:
        pattern = self._patterns.get(phrase)
        if pattern is None:
            pattern = _phrase_pattern(phrase)
            self._patterns[phrase] = pattern
        return pattern.search(text)

    def normalize_skill(self, raw: str) -> tuple[str, str | None]:
        normalized = _normalize_text(raw)
        return normalized, self._synonyms.get(normalized)

    def canonical_skill(self, raw: str) -> str:
        normalized, canonical = self.normalize_skill(raw)
        return canonical or normalized

    def role_families_for_title(self, title: str) -> list[str]:
        text = _normalize_text(title)
        if not text:
            return []
        return [
            family.family_id
            for family in self._families
            if any(self._contains(text, marker) for marker in family.title_markers)
        ]

    def role_families_for_skill(self, skill: str) -> list[str]:
        name = self.canonical_skill(skill)
        if not name:
            return []
        return [family.family_id for family in self._families if name in family.skill_markers]

    def family_order(self) -> list[str]:
        return [family.family_id for family in self._families]

    def role_name(self, family_id: str) -> str | None:
        family = self._families_by_id.get(family_id)
        return family.role if family else None

    def is_remote_friendly(self, family_id: str) -> bool:
        family = self._families_by_id.get(family_id)
        return bool(family and family.remote_friendly)

    def find_locations(self, text: str) -> list[str]:
        lowered = (text or "").lower()
        if not lowered:
            return []
        hits: list[tuple[int, int, str]] = []
        for order, city in enumerate(self._cities):
            match = self._contains(lowered, city.lower())
            if match:
                hits.append((match.start(), order, city))
        return [city for _start, _order, city in sorted(hits)]

    def region_for(self, location: str) -> str | None:
        lowered = _normalize_text(location)
        if not lowered:
            return None
        cities = self.find_locations(lowered)
        if cities:
            return self._cities[cities[0]]
        for region in self._regions:
            if self._contains(lowered, region.lower()):
                return region
        for alias, region in self._region_aliases.items():
            if self._contains(lowered, alias):
                return region
        return None
