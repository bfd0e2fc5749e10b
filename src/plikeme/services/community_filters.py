# src/plikeme/services/community_filters.py
"""Selection state for community / sub-community filters."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, NamedTuple

from .membership import membership_level, normalize_axis

__all__ = ["CommunityFilter", "CommunitySelection"]

logger = logging.getLogger(__name__)


class CommunityFilter(NamedTuple):
    """One selectable community level. Unset axes are stored as ''."""

    community_id: int
    stage: str = ""
    type: str = ""

    @property
    def level(self) -> int:
        return membership_level(self.stage, self.type)

    def as_dict(self) -> dict[str, Any]:
        return {"id": self.community_id, "stage": self.stage, "type": self.type}


class CommunitySelection:
    """Ordered set of selected ``(community_id, stage, type)`` keys.

    Used to de-duplicate thread community links and to carry user search
    filters. Insertion order is preserved.
    """

    def __init__(self, filters: Iterable[CommunityFilter] = ()) -> None:
        self._selected: dict[CommunityFilter, None] = {}
        for item in filters:
            self._selected.setdefault(item, None)

    @staticmethod
    def _key(community_id: int, stage: str | None = None, type_: str | None = None) -> CommunityFilter:
        return CommunityFilter(int(community_id), normalize_axis(stage), normalize_axis(type_))

    @classmethod
    def from_filter_list(cls, items: Iterable[Mapping[str, Any]]) -> CommunitySelection:
        """Build a selection from ``[{"id", "stage", "type"}]`` items.

        Items without an integer ``id``, or whose stage or type is not a
        string, are skipped.
        """
        selection = cls()
        for item in items:
            if not isinstance(item, Mapping):
                continue
            raw_id = item.get("id")
            if isinstance(raw_id, bool):
                continue
            try:
                community_id = int(raw_id)  # type: ignore[arg-type]
            except (TypeError, ValueError):
                continue
            stage, type_ = item.get("stage"), item.get("type")
            if not all(value is None or isinstance(value, str) for value in (stage, type_)):
                logger.warning("skipping community filter with non-text stage/type: %r", item)
                continue
            selection.add(community_id, stage, type_)
        return selection

    @classmethod
    def from_json(cls, raw: str) -> CommunitySelection:
        """Parse the JSON filter list used by the search endpoint.

        Raises:
            ValueError: If ``raw`` is not valid JSON or not a list.
        """
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError("community filters must be a JSON list")
        return cls.from_filter_list(data)

    @classmethod
    def from_id_list(cls, raw: str) -> CommunitySelection:
        """Parse a comma separated list of community ids at Level I."""
        selection = cls()
        for part in raw.split(","):
            part = part.strip()
            if part.isdigit():
                selection.add(int(part))
        return selection

    def add(self, community_id: int, stage: str | None = None, type_: str | None = None) -> bool:
        """Select a key. Returns False if it was already selected."""
        key = self._key(community_id, stage, type_)
        if key in self._selected:
            return False
        self._selected[key] = None
        return True

    def remove(self, community_id: int, stage: str | None = None, type_: str | None = None) -> bool:
        """Deselect a key. Returns False if it was not selected."""
        key = self._key(community_id, stage, type_)
        if key not in self._selected:
            return False
        del self._selected[key]
        return True

    def toggle(self, community_id: int, stage: str | None = None, type_: str | None = None) -> bool:
        """Flip a key and return whether it is selected afterwards."""
        if self.remove(community_id, stage, type_):
            return False
        self.add(community_id, stage, type_)
        return True

    def is_selected(self, community_id: int, stage: str | None = None, type_: str | None = None) -> bool:
        return self._key(community_id, stage, type_) in self._selected

    def clear(self) -> None:
        self._selected.clear()

    def filters(self) -> list[CommunityFilter]:
        """Return the selected keys in insertion order."""
        return list(self._selected)

    def community_ids(self) -> list[int]:
        """Return distinct selected community ids in insertion order."""
        return list(dict.fromkeys(item.community_id for item in self._selected))

    def to_json(self) -> str:
        return json.dumps([item.as_dict() for item in self._selected], ensure_ascii=False)

    def __contains__(self, item: object) -> bool:
        return item in self._selected

    def __iter__(self) -> Iterator[CommunityFilter]:
        return iter(list(self._selected))

    def __len__(self) -> int:
        return len(self._selected)

    def __bool__(self) -> bool:
        return bool(self._selected)

    def __repr__(self) -> str:
        return f"CommunitySelection({self.filters()!r})"
