from __future__ import annotations

from dataclasses import dataclass

# Process types whose lead time does not depend on the production line.
# Only the first character of the process type is checked.
ROUTING_AGNOSTIC_MARKERS = frozenset({"U", "_", "K"})


@dataclass(frozen=True)
class Settings:
    routing_agnostic_markers: frozenset[str] = ROUTING_AGNOSTIC_MARKERS
    log_level: str = "INFO"


def default_settings() -> Settings:
    return Settings()
