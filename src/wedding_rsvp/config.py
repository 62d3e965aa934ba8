"""Settings read from the environment (and a ``.env`` file if present)."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from .models import EventKind, parse_bool, parse_pipe_list
from .planner import DEFAULT_MEAL_OPTIONS, MealPolicy


@dataclass(frozen=True)
class Settings:
    parties_csv: str = "parties.csv"
    members_csv: str = "members.csv"
    meal_event: EventKind = EventKind.CEREMONY
    meal_options: Tuple[str, ...] = DEFAULT_MEAL_OPTIONS
    meal_on_single_event: bool = False
    log_level: str = "WARNING"

    def meal_policy(self) -> MealPolicy:
        return MealPolicy(
            meal_event=self.meal_event,
            options=self.meal_options,
            on_single_event=self.meal_on_single_event,
        )


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``env``, or from ``os.environ`` after loading ``.env``."""
    if env is None:
        load_dotenv()
        env = os.environ
    defaults = Settings()

    meal_event_raw = env.get("RSVP_MEAL_EVENT", defaults.meal_event.value).strip().lower()
    try:
        meal_event = EventKind(meal_event_raw)
    except ValueError:
        raise ValueError(f"RSVP_MEAL_EVENT must be 'ceremony' or 'celebration', got {meal_event_raw!r}") from None

    options = tuple(parse_pipe_list(env.get("RSVP_MEAL_OPTIONS"))) or defaults.meal_options

    log_level = env.get("RSVP_LOG_LEVEL", defaults.log_level).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"Unknown RSVP_LOG_LEVEL: {log_level}")

    return Settings(
        parties_csv=env.get("RSVP_PARTIES_CSV", defaults.parties_csv),
        members_csv=env.get("RSVP_MEMBERS_CSV", defaults.members_csv),
        meal_event=meal_event,
        meal_options=options,
        meal_on_single_event=parse_bool(env.get("RSVP_MEAL_ON_SINGLE_EVENT", "false")),
        log_level=log_level,
    )
