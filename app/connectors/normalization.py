"""
Field coercion helpers shared by the source adapters.

Every helper is total: malformed input yields an empty / None value rather
than an exception, so one odd field never costs the whole item.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

from bs4 import BeautifulSoup

from db.models.opportunity import OpportunityType, WorkMode

_KEY_NORMALIZER = re.compile(r"[^a-z0-9]")
_WHITESPACE = re.compile(r"\s+")
_NUMBER = re.compile(r"\d+(?:\.\d+)?")

_TYPE_ALIASES = {
    "JOB": OpportunityType.JOB,
    "INTERNSHIP": OpportunityType.INTERNSHIP,
    "WALKIN": OpportunityType.WALKIN,
    "WALK-IN": OpportunityType.WALKIN,
    "WALK_IN": OpportunityType.WALKIN,
}


def _normalize_key(key: str) -> str:
    return _KEY_NORMALIZER.sub("", key.lower())


class LooseRecord:
    """
    Case- and separator-insensitive view over one raw feed item.

    `LooseRecord({"Apply_URL": "x"}).get("applyUrl")` returns "x".
    """

    def __init__(self, item: Mapping[str, Any]) -> None:
        self._values: dict[str, Any] = {}
        for key, value in item.items():
            self._values.setdefault(_normalize_key(str(key)), value)

    def get(self, *names: str) -> Any:
        for name in names:
            value = self._values.get(_normalize_key(name))
            if value is None or value == "" or value == [] or value == {}:
                continue
            return value
        return None

    def text(self, *names: str) -> str:
        value = self.get(*names)
        if value is None or isinstance(value, (dict, list)):
            return ""
        return str(value).strip()

    def mapping(self, *names: str) -> Mapping[str, Any]:
        value = self.get(*names)
        return value if isinstance(value, Mapping) else {}


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    return _WHITESPACE.sub(" ", str(value)).strip()


def strip_html(value: Any) -> str:
    """
    Drop tags and decode entities (&nbsp;, &amp;, &quot;, &#39;, &lt;, &gt;, ...).
    """

    if value is None:
        return ""
    text = str(value)
    if not text.strip():
        return ""
    soup = BeautifulSoup(text, "html.parser")
    return clean_text(soup.get_text(" "))


def to_opportunity_type(value: Any, fallback: str = OpportunityType.JOB) -> str:
    raw = str(value or "").strip().upper()
    return _TYPE_ALIASES.get(raw, fallback)


def to_string_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(entry).strip() for entry in value if entry is not None and str(entry).strip()]
    return [part.strip() for part in str(value).split(",") if part.strip()]


def to_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str) and value.strip():
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def to_year_list(value: Any) -> list[int]:
    years: list[int] = []
    for entry in value if isinstance(value, (list, tuple)) else to_string_list(value):
        number = to_number(entry)
        if number is not None:
            years.append(int(number))
    return years


def explicit_work_mode(value: Any) -> str | None:
    raw = str(value or "").strip().upper().replace("-", "").replace("_", "").replace(" ", "")
    return raw if raw in WorkMode.ALL else None


def infer_work_mode(content: str) -> str | None:
    """
    Keyword fallback over title + description; remote wins over hybrid over onsite.
    """

    text = content.lower()
    if "remote" in text:
        return WorkMode.REMOTE
    if "hybrid" in text:
        return WorkMode.HYBRID
    if "onsite" in text or "on-site" in text or "on site" in text:
        return WorkMode.ONSITE
    return None


def resolve_work_mode(explicit: Any, *content: str | None) -> str | None:
    return explicit_work_mode(explicit) or infer_work_mode(" ".join(part or "" for part in content))


def parse_experience_range(value: Any) -> tuple[float | None, float | None]:
    """
    "0-5 years" -> (0, 5); "2 yrs" -> (2, 2); "fresher" -> (0, 0); absent -> (None, None).
    """

    if isinstance(value, bool) or value is None:
        return None, None
    text = str(value).strip().lower()
    if not text:
        return None, None
    if "fresher" in text or "entry level" in text:
        return 0.0, 0.0
    numbers = [float(match) for match in _NUMBER.findall(text)]
    if not numbers:
        return None, None
    if len(numbers) == 1:
        return numbers[0], numbers[0]
    return numbers[0], numbers[1]


def extract_list(payload: Any, keys: tuple[str, ...]) -> list[Any]:
    """
    Return the payload itself if it is a list, else the first list found under `keys`.
    """

    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []
