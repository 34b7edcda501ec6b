"""
Normalization of stored slot records on load.

Older records stored ``day`` as an ISO calendar date (``yyyy-MM-dd``) and
sometimes an unpadded ``startTime`` (``9:00``). Records carry no schema
version, so the encoding is recognized by shape. Normalized records are
not written back; they reach storage again only when the schedule is saved.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable, Optional

from helper import weekday_name
from models import Weekday, WEEKDAY_NAMES

logger = logging.getLogger(__name__)

_ISO_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_UNPADDED_TIME_PATTERN = re.compile(r"[0-9]:[0-9]{2}")


class DayEncoding(str, Enum):
    CANONICAL = "canonical"
    LEGACY_DATE = "legacy_date"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ParsedDay:
    encoding: DayEncoding
    weekday: Optional[Weekday] = None


def parse_day(value: Any) -> ParsedDay:
    """Classifies a stored ``day`` value; canonical names are tried first, then ISO dates."""
    if isinstance(value, str) and value in WEEKDAY_NAMES:
        return ParsedDay(DayEncoding.CANONICAL, Weekday(value))

    if isinstance(value, str) and _ISO_DATE_PATTERN.fullmatch(value):
        try:
            return ParsedDay(DayEncoding.LEGACY_DATE, weekday_name(date.fromisoformat(value)))
        except ValueError:
            # shaped like a date but not a real calendar day
            pass

    return ParsedDay(DayEncoding.UNRECOGNIZED)


def normalize_start_time_legacy(value: Any) -> Any:
    if isinstance(value, str) and len(value) == 4 and _UNPADDED_TIME_PATTERN.fullmatch(value):
        return "0" + value
    return value


def normalize_record(record: Any) -> Any:
    """
    Brings a single stored record into canonical form.

    Unrecognized values are passed through untouched so that validation can
    report them; no record is ever dropped here.
    """
    if not isinstance(record, dict):
        return record

    normalized = dict(record)
    parsed = parse_day(record.get("day"))
    if parsed.encoding is DayEncoding.LEGACY_DATE:
        normalized["day"] = parsed.weekday.value
    if "startTime" in record:
        normalized["startTime"] = normalize_start_time_legacy(record["startTime"])
    return normalized


def normalize_records(records: Iterable[Any]) -> list:
    records = list(records)
    normalized = [normalize_record(r) for r in records]

    migrated = sum(1 for before, after in zip(records, normalized) if before != after)
    if migrated:
        logger.info("Normalized %d legacy slot record(s) on load", migrated)
    return normalized
