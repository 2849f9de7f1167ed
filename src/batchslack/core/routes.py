from __future__ import annotations

import logging
from collections.abc import Iterable
from types import MappingProxyType
from typing import Mapping

from batchslack.core.models import BatchRoute, RouteStep

logger = logging.getLogger(__name__)


def group_by_batch(
    steps: Iterable[RouteStep],
    requested_batch_ids: Iterable[str] | None = None,
) -> Mapping[str, BatchRoute]:
    """Group a flat list of route steps into one ordered route per batch.

    The caller's bulk fetch already orders steps by (batch_id, stage_sequence);
    that order is kept as-is within each batch. Steps are never re-sorted here
    because the finished-step skipping in the slack engine relies on it.

    `requested_batch_ids` is informational only: this is a pure grouping, so
    steps of other batches are kept as well. Filtering belongs to the caller.
    """
    grouped: dict[str, list[RouteStep]] = {}
    for step in steps:
        grouped.setdefault(step.batch_id, []).append(step)

    if requested_batch_ids is not None:
        requested = set(requested_batch_ids)
        extra = [bid for bid in grouped if bid not in requested]
        missing = [bid for bid in requested if bid not in grouped]
        if extra:
            logger.debug("Route rows for %d batches outside the requested set", len(extra))
        if missing:
            logger.debug("No route rows for %d requested batches", len(missing))

    return MappingProxyType({bid: tuple(rows) for bid, rows in grouped.items()})
