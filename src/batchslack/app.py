from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path

from batchslack.core.lead_times import LeadTimeIndex
from batchslack.core.routes import group_by_batch
from batchslack.data.excel_io import coerce_date
from batchslack.data.records import load_lead_times, load_route_steps, load_slack_inputs
from batchslack.logging_conf import configure_logging
from batchslack.report import SlackReport, build_slack_report, report_to_frame
from batchslack.settings import Settings, default_settings

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Remaining lead time and slack per batch")
    parser.add_argument("--batches", type=Path, required=True, help="Batch export (b_id, b_dprom)")
    parser.add_argument("--lead-times", type=Path, default=None, help="Lead time export (c_leadt)")
    parser.add_argument("--routes", type=Path, default=None, help="Route step export (m_linemv)")
    parser.add_argument("--today", type=str, default=None, help="Reference date, YYYY-MM-DD")
    parser.add_argument("--output", type=Path, default=None, help="Write the report to .csv or .xlsx")
    parser.add_argument("--log-level", type=str, default=default_settings().log_level)
    return parser


def run_report(
    *,
    batches: Path,
    lead_times: Path | None,
    routes: Path | None,
    today: date,
    settings: Settings | None = None,
) -> SlackReport:
    """Load the three tables once and compute slack for the whole batch list."""
    settings = settings or default_settings()
    inputs = load_slack_inputs(batches)

    entries = load_lead_times(lead_times) if lead_times is not None else None
    index = None
    if entries is not None:
        index = LeadTimeIndex.build(entries, markers=settings.routing_agnostic_markers)

    # Only batches with a promise date need their route
    wanted = [i.batch_id for i in inputs if i.promise_date is not None]
    steps = load_route_steps(routes, wanted) if routes is not None else None
    route_map = group_by_batch(steps, wanted) if steps is not None else None

    report = build_slack_report(inputs, index, route_map, today=today)
    if not report.has_lead_time_data:
        logger.warning("Lead time data not available; slack is promise date minus today")
    return report


def write_report(report: SlackReport, path: Path) -> None:
    df = report_to_frame(report)
    if path.suffix.lower() in {".xlsx", ".xlsm"}:
        df.to_excel(path, index=False, engine="openpyxl")
    else:
        df.to_csv(path, index=False)
    logger.info("Report written to %s", path)


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.log_level)
    settings = Settings(log_level=args.log_level)

    today = date.today()
    if args.today:
        try:
            today = coerce_date(args.today) or today
        except ValueError as exc:
            logger.error("%s", exc)
            return 2

    report = run_report(
        batches=args.batches,
        lead_times=args.lead_times,
        routes=args.routes,
        today=today,
        settings=settings,
    )

    df = report_to_frame(report)
    print(df.to_string(index=False) if not df.empty else "(no batches with a promise date)")
    print(f"{len(report.rows)} batches, {report.behind_count} behind schedule{report.status_note}")

    if args.output is not None:
        write_report(report, args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
