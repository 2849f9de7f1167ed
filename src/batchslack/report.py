from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Mapping

import pandas as pd

from batchslack.core.lead_times import LeadTimeIndex
from batchslack.core.models import BatchRoute, SlackInput
from batchslack.core.slack import batch_lead_time_days, compute_slack, compute_slack_for_batches

NO_LEAD_TIME_NOTE = " [Slack: no lead time data]"

REPORT_COLUMNS = ["batch_id", "promise_date", "simple_slack", "ltime_days", "slack", "behind"]


@dataclass(frozen=True)
class SlackRow:
    batch_id: str
    promise_date: date
    simple_slack: int
    ltime_days: int
    slack: int

    @property
    def is_behind(self) -> bool:
        return self.slack < 0


@dataclass(frozen=True)
class SlackReport:
    rows: tuple[SlackRow, ...]
    has_lead_time_data: bool

    @property
    def status_note(self) -> str:
        """Suffix for the screen status line."""
        return "" if self.has_lead_time_data else NO_LEAD_TIME_NOTE

    @property
    def behind_count(self) -> int:
        return sum(1 for r in self.rows if r.is_behind)


def build_slack_report(
    inputs: Iterable[SlackInput],
    index: LeadTimeIndex | None,
    routes: Mapping[str, BatchRoute] | None,
    *,
    today: date,
) -> SlackReport:
    """Per-batch slack detail, in input order.

    Slack comes from `compute_slack_for_batches`; the simple margin and the
    remaining lead time are kept alongside so a reader can see how it was
    derived. Batches without a promise date are left out. A batch id listed
    twice gives one row, built from its last input like the slack mapping.
    """
    inputs = list(inputs)
    results, has_data = compute_slack_for_batches(inputs, index, routes, today=today)

    latest: dict[str, SlackInput] = {}
    for item in inputs:
        if item.promise_date is not None:
            latest[item.batch_id] = item

    rows: list[SlackRow] = []
    for item in latest.values():
        ltime_days = batch_lead_time_days(item, index, routes) if has_data else 0
        rows.append(
            SlackRow(
                batch_id=item.batch_id,
                promise_date=item.promise_date,
                simple_slack=compute_slack(item.promise_date, today, 0, False),
                ltime_days=ltime_days,
                slack=results[item.batch_id],
            )
        )
    return SlackReport(rows=tuple(rows), has_lead_time_data=has_data)


def report_to_frame(report: SlackReport) -> pd.DataFrame:
    records = [
        {
            "batch_id": r.batch_id,
            "promise_date": r.promise_date.isoformat(),
            "simple_slack": r.simple_slack,
            "ltime_days": r.ltime_days,
            "slack": r.slack,
            "behind": r.is_behind,
        }
        for r in report.rows
    ]
    return pd.DataFrame.from_records(records, columns=REPORT_COLUMNS)
