"""Remaining lead time and slack engine for production batches."""

from batchslack.core.lead_times import LeadTimeIndex
from batchslack.core.models import BatchRoute, LeadTimeEntry, RouteStep, SlackInput
from batchslack.core.routes import group_by_batch
from batchslack.core.slack import compute_slack, compute_slack_for_batches, remaining_lead_time_days

__all__ = [
    "BatchRoute",
    "LeadTimeEntry",
    "LeadTimeIndex",
    "RouteStep",
    "SlackInput",
    "compute_slack",
    "compute_slack_for_batches",
    "group_by_batch",
    "remaining_lead_time_days",
]
