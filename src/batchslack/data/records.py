"""Map fetched table rows onto the engine's typed records.

Column names follow the legacy tables (after `normalize_col_name`):

- lead times (c_leadt): ptype_id, proc_id, pline_id, leadt_days
- route steps (m_linemv): b_id, ptype_id, cpproc_id, pline_id, fin, cp_stage
- batches (d_line): b_id, b_dprom

The `*_from_frame` converters are strict about structure (missing columns
raise ValueError) and lenient about values, the way the legacy screens read
them. The `load_*` helpers wrap reading + conversion and return None when a
table cannot be read, which the engine treats as "no lead time data".
"""

from __future__ import annotations

import logging
import math
import zipfile
from collections.abc import Iterable
from pathlib import Path

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from batchslack.core.models import LeadTimeEntry, RouteStep, SlackInput
from batchslack.data.excel_io import (
    as_text,
    coerce_bool,
    coerce_date,
    coerce_float,
    parse_int_strict,
    read_table,
    require_columns,
)

logger = logging.getLogger(__name__)

LEAD_TIME_COLUMNS = ["ptype_id", "proc_id", "pline_id", "leadt_days"]
ROUTE_COLUMNS = ["b_id", "ptype_id", "cpproc_id", "pline_id", "fin", "cp_stage"]
BATCH_COLUMNS = ["b_id", "b_dprom"]

# Failures that mean "this table is not usable" for the loaders below.
_TABLE_ERRORS = (
    OSError,
    ValueError,
    KeyError,
    pd.errors.ParserError,
    pd.errors.EmptyDataError,
    zipfile.BadZipFile,
    InvalidFileException,
)


def lead_time_entries_from_frame(df: pd.DataFrame) -> list[LeadTimeEntry]:
    require_columns(df, LEAD_TIME_COLUMNS, table="lead times")

    entries: list[LeadTimeEntry] = []
    for r in df[LEAD_TIME_COLUMNS].itertuples(index=False):
        # Unreadable or non-finite day counts count as 0, negative ones are clamped
        days = coerce_float(r.leadt_days) or 0.0
        if not math.isfinite(days):
            days = 0.0
        entries.append(
            LeadTimeEntry(
                process_type=as_text(r.ptype_id),
                process_id=as_text(r.proc_id),
                production_line_id=as_text(r.pline_id),
                lead_time_days=max(days, 0.0),
            )
        )
    return entries


def sort_route_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Order route rows by (b_id, cp_stage) for sources that come unordered."""
    out = df.copy()
    out["_stage"] = pd.to_numeric(out["cp_stage"], errors="coerce")
    out["_bid"] = out["b_id"].astype(str).str.strip()
    out = out.sort_values(["_bid", "_stage"], kind="stable")
    return out.drop(columns=["_stage", "_bid"]).reset_index(drop=True)


def route_steps_from_frame(df: pd.DataFrame) -> list[RouteStep]:
    """Convert route rows in frame order; the caller supplies (b_id, cp_stage) order.

    Rows with an unreadable cp_stage are logged and skipped; the rest of the
    table stays usable.
    """
    require_columns(df, ROUTE_COLUMNS, table="route steps")

    steps: list[RouteStep] = []
    for r in df[ROUTE_COLUMNS].itertuples(index=False):
        batch_id = as_text(r.b_id).strip()
        try:
            stage = parse_int_strict(r.cp_stage, field="cp_stage")
        except ValueError as exc:
            logger.warning("Batch %s: route row skipped (%s)", batch_id, exc)
            continue
        steps.append(
            RouteStep(
                batch_id=batch_id,
                process_type=as_text(r.ptype_id),
                process_id=as_text(r.cpproc_id),
                production_line_id=as_text(r.pline_id),
                stage_sequence=stage,
                finished=coerce_bool(r.fin),
            )
        )
    return steps


def slack_inputs_from_frame(df: pd.DataFrame) -> list[SlackInput]:
    require_columns(df, BATCH_COLUMNS, table="batches")

    inputs: list[SlackInput] = []
    for r in df[BATCH_COLUMNS].itertuples(index=False):
        batch_id = as_text(r.b_id).strip()
        try:
            promise_date = coerce_date(r.b_dprom)
        except ValueError:
            logger.warning("Batch %s: unreadable promise date %r, slack skipped", batch_id, r.b_dprom)
            promise_date = None
        inputs.append(SlackInput(batch_id=batch_id, promise_date=promise_date))
    return inputs


def load_lead_times(path: str | Path) -> list[LeadTimeEntry] | None:
    try:
        entries = lead_time_entries_from_frame(read_table(path))
    except _TABLE_ERRORS as exc:
        logger.warning("Lead time table not available (%s): %s", path, exc)
        return None
    logger.info("Loaded %d lead time rows from %s", len(entries), path)
    return entries


def load_route_steps(path: str | Path, batch_ids: Iterable[str] | None = None) -> list[RouteStep] | None:
    """Load route steps, keeping only `batch_ids` when given.

    An empty id set means there is nothing to fetch and gives None.
    """
    wanted = None
    if batch_ids is not None:
        wanted = {str(b).strip() for b in batch_ids}
        if not wanted:
            return None

    try:
        df = read_table(path)
        require_columns(df, ROUTE_COLUMNS, table="route steps")
        if wanted is not None:
            df = df[df["b_id"].astype(str).str.strip().isin(wanted)]
        steps = route_steps_from_frame(sort_route_frame(df))
    except _TABLE_ERRORS as exc:
        logger.warning("Route table not available (%s): %s", path, exc)
        return None
    logger.info("Loaded %d route steps from %s", len(steps), path)
    return steps


def load_slack_inputs(path: str | Path) -> list[SlackInput]:
    """Load the batch list. Unlike the reference tables this one is required."""
    inputs = slack_inputs_from_frame(read_table(path))
    logger.info("Loaded %d batches from %s", len(inputs), path)
    return inputs
