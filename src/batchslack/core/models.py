from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class LeadTimeEntry:
    process_type: str
    process_id: str
    production_line_id: str
    lead_time_days: float = 0.0

    @property
    def full_key(self) -> str:
        return self.process_type + self.process_id + self.production_line_id

    @property
    def short_key(self) -> str:
        return self.process_type + self.process_id


@dataclass(frozen=True)
class RouteStep:
    batch_id: str
    process_type: str
    process_id: str
    production_line_id: str
    stage_sequence: int
    finished: bool = False


# Steps of one batch, ascending by stage_sequence.
BatchRoute = tuple[RouteStep, ...]


@dataclass(frozen=True)
class SlackInput:
    batch_id: str
    # None excludes the batch from slack computation
    promise_date: date | None = None
    # When set, takes precedence over the route mapping handed to the engine
    route: BatchRoute | None = None
