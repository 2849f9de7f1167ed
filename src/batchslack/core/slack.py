from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import date
from typing import Mapping

from batchslack.core.lead_times import LeadTimeIndex
from batchslack.core.models import BatchRoute, SlackInput

logger = logging.getLogger(__name__)


def round_up_days(total_days: float) -> int:
    """Partial days cost a full day: 3.0 -> 3, 3.01 -> 4, 0 -> 0.

    Non-finite totals (inf, nan) count as 0.
    """
    if not math.isfinite(total_days):
        return 0
    whole = math.floor(total_days)
    if total_days - whole > 0:
        return int(whole) + 1
    return int(whole)


def remaining_lead_time_days(route: BatchRoute | None, index: LeadTimeIndex | None) -> int:
    """Sum lead times of the steps a batch still has to go through.

    Leading finished steps are skipped. From the first unfinished step onward
    every step counts, including later steps already marked finished.
    NOTE: this reproduces the legacy delivery schedule exactly. Counting only
    unfinished steps would also be defensible; keep this rule unless product
    owners confirm otherwise.

    Steps without a lead time entry contribute 0.
    """
    if route is None or index is None:
        return 0

    total_days = 0.0
    past_initial_finished_run = False
    for step in route:
        if not past_initial_finished_run:
            if step.finished:
                continue
            past_initial_finished_run = True

        days, _found = index.lookup(step.process_type, step.process_id, step.production_line_id)
        total_days += days

    return round_up_days(total_days)


def batch_lead_time_days(
    item: SlackInput,
    index: LeadTimeIndex | None,
    routes: Mapping[str, BatchRoute] | None,
) -> int:
    """Remaining lead time of one batch; its own route wins over the mapping."""
    route = item.route
    if route is None and routes is not None:
        route = routes.get(item.batch_id)
    return remaining_lead_time_days(route, index)


def compute_slack(promise_date: date, today: date, ltime_days: int, has_lead_time_data: bool) -> int:
    """Days of margin against the promise date; negative means behind schedule.

    Without lead time data the margin degrades to promise_date - today.
    """
    margin = (promise_date - today).days
    if has_lead_time_data:
        return margin - ltime_days
    return margin


def compute_slack_for_batches(
    inputs: Iterable[SlackInput],
    index: LeadTimeIndex | None,
    routes: Mapping[str, BatchRoute] | None,
    *,
    today: date,
) -> tuple[dict[str, int], bool]:
    """Compute slack for every batch that has a promise date.

    Returns (results, has_lead_time_data). The flag is query-wide: it is True
    only when both the lead time index and the route mapping were supplied.
    Batches without a promise date are left out of `results`; batches without
    route rows count as zero remaining lead time.
    """
    has_lead_time_data = index is not None and routes is not None
    results: dict[str, int] = {}

    for item in inputs:
        if item.promise_date is None:
            continue

        ltime_days = batch_lead_time_days(item, index, routes) if has_lead_time_data else 0
        results[item.batch_id] = compute_slack(item.promise_date, today, ltime_days, has_lead_time_data)

    if not has_lead_time_data:
        logger.debug("No lead time data for this query; slack is promise date minus today")
    logger.debug("Slack computed for %d batches", len(results))
    return results, has_lead_time_data
