"""Sampled logging for per-stage growth diagnostics.

Growth stages fire on every tick while a kind is active, so the engine logs
stage summaries and candidate counts through a key such as
``growth.roots.stage``. ``CANOPY_LOG_RULES`` tunes individual keys with
entries of the form ``key=interval[:LEVEL[:FALLBACK]]``, separated by commas.
"""

from __future__ import annotations

import logging
import os
import re
import time
from dataclasses import dataclass
from functools import cache
from typing import Callable, Sequence

LOG_RULES_ENV_VAR = "CANOPY_LOG_RULES"
DEFAULT_INTERVAL_ENV_VAR = "CANOPY_LOG_DEFAULT_INTERVAL"
DEFAULT_INTERVAL_SECONDS = 1.0

_RULE_PATTERN = re.compile(
    r"^(?P<key>[^=]+)="
    r"(?P<interval>none|\d+(?:\.\d+)?)"
    r"(?::(?P<level>[A-Za-z]+))?"
    r"(?::(?P<fallback>[A-Za-z]+))?$"
)


@dataclass(frozen=True)
class LogRule:
    """``interval_seconds=None`` logs every call at ``level``.

    Otherwise the first call per interval uses ``level`` and the rest go out
    at ``fallback_level``, or are dropped when it is ``None``.
    """

    interval_seconds: float | None = DEFAULT_INTERVAL_SECONDS
    level: int | None = None
    fallback_level: int | None = logging.DEBUG


class LoggingController:
    def __init__(
        self,
        *,
        default_rule: LogRule = LogRule(),
        rules: dict[str, LogRule] | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_rule = default_rule
        self._rules = rules or {}
        self._monotonic = monotonic
        self._next_emit: dict[str, float] = {}

    def log(
        self,
        *,
        key: str,
        logger: logging.Logger,
        level: int,
        msg: str,
        args: Sequence[object] = (),
    ) -> bool:
        """Log ``msg`` for ``key``; returns ``True`` when it went out at full level."""

        rule = self._rules.get(key, self._default_rule)
        primary = rule.level or level

        now = self._monotonic()
        if rule.interval_seconds is None or now >= self._next_emit.get(key, 0.0):
            if rule.interval_seconds is not None:
                self._next_emit[key] = now + rule.interval_seconds
            logger.log(primary, msg, *args)
            return True

        if rule.fallback_level is not None:
            logger.log(rule.fallback_level, msg, *args)
        return False


def _parse_level(name: str | None) -> int | None:
    if name is None or name.lower() == "none":
        return None
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level {name!r} in {LOG_RULES_ENV_VAR}")
    return level


def _parse_interval(value: str) -> float | None:
    return None if value.lower() == "none" else float(value)


def parse_rules(raw: str) -> dict[str, LogRule]:
    rules: dict[str, LogRule] = {}
    for entry in (part.strip() for part in raw.split(",")):
        if not entry:
            continue
        match = _RULE_PATTERN.match(entry)
        if match is None:
            raise ValueError(
                f"Invalid {LOG_RULES_ENV_VAR} entry {entry!r}; "
                "expected 'key=interval[:LEVEL[:FALLBACK]]'"
            )
        fallback = match.group("fallback")
        rules[match.group("key").strip()] = LogRule(
            interval_seconds=_parse_interval(match.group("interval")),
            level=_parse_level(match.group("level")),
            fallback_level=logging.DEBUG if fallback is None else _parse_level(fallback),
        )
    return rules


@cache
def get_logging_controller() -> LoggingController:
    """Return the shared controller configured from the environment."""

    interval_raw = os.getenv(DEFAULT_INTERVAL_ENV_VAR)
    default_rule = LogRule(
        interval_seconds=(
            DEFAULT_INTERVAL_SECONDS
            if interval_raw is None
            else _parse_interval(interval_raw)
        )
    )
    return LoggingController(
        default_rule=default_rule,
        rules=parse_rules(os.getenv(LOG_RULES_ENV_VAR, "")),
    )
