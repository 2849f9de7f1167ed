from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from types import MappingProxyType
from typing import Mapping

from batchslack.core.models import LeadTimeEntry
from batchslack.settings import ROUTING_AGNOSTIC_MARKERS

logger = logging.getLogger(__name__)


class LeadTimeIndex:
    """Read-only lookup of lead time days by process type/process/line.

    Two kinds of keys live in the same mapping:
    - full key: process_type + process_id + production_line_id
    - short key: process_type + process_id

    Every entry registers both keys. Insertion is first-wins: a later entry
    with an already known key is ignored, so duplicated reference rows never
    change the result depending on row order.

    Lookups for process types whose first character is a routing-agnostic
    marker ("U", "_", "K" by default) use the short key, everything else uses
    the full key.
    """

    __slots__ = ("_days", "_markers")

    def __init__(self, days: Mapping[str, float], markers: Iterable[str] = ROUTING_AGNOSTIC_MARKERS):
        self._days = MappingProxyType(dict(days))
        self._markers = frozenset(markers)

    @classmethod
    def build(
        cls,
        entries: Iterable[LeadTimeEntry],
        *,
        markers: Iterable[str] = ROUTING_AGNOSTIC_MARKERS,
    ) -> LeadTimeIndex:
        days: dict[str, float] = {}
        ignored = 0
        for entry in entries:
            value = float(entry.lead_time_days)
            if not math.isfinite(value):
                # unusable reference value, same as a missing one
                value = 0.0
            for key in (entry.full_key, entry.short_key):
                if key in days:
                    ignored += 1
                    continue
                days[key] = value

        logger.debug("Lead time index built: %d keys (%d duplicate keys ignored)", len(days), ignored)
        return cls(days, markers)

    def key_for(self, process_type: str, process_id: str, production_line_id: str) -> str:
        if process_type[:1] in self._markers:
            return process_type + process_id
        return process_type + process_id + production_line_id

    def lookup(self, process_type: str, process_id: str, production_line_id: str) -> tuple[float, bool]:
        """Return (days, found); unknown combinations give (0.0, False)."""
        key = self.key_for(process_type, process_id, production_line_id)
        days = self._days.get(key)
        if days is None:
            return 0.0, False
        return days, True

    @property
    def markers(self) -> frozenset[str]:
        return self._markers

    def as_mapping(self) -> Mapping[str, float]:
        return self._days

    def __len__(self) -> int:
        return len(self._days)

    def __contains__(self, key: object) -> bool:
        return key in self._days

    def __repr__(self) -> str:
        return f"LeadTimeIndex({len(self._days)} keys)"
