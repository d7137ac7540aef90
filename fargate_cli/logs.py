"""Fetching, de-duplicating and following log events of a service or task."""

from __future__ import annotations

import random
import re
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable

from .cloudwatchlogs import CloudWatchLogs, GetLogsInput

LOG_STREAM_NAME_FORMAT = "fargate/%s/%s"
EVENT_CACHE_SIZE = 10000
FOLLOW_OVERLAP = timedelta(seconds=10)

_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_COMPONENT = re.compile(r"([0-9]*(?:\.[0-9]*)?)(ns|us|µs|μs|ms|h|m|s)")
_MAX_NANOS = 2**63 - 1

_TIME = re.compile(r"(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})")
_TIME_WITH_ZONE = re.compile(r"(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2}) ([A-Z]{3,5})")

Emit = Callable[[str, str, int, str, bool], None]


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``-1h10m30s`` or ``1.5h``."""
    error = ValueError(f'time: invalid duration "{text}"')
    body = text
    negative = False
    if body.startswith(("-", "+")):
        negative = body[0] == "-"
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if not body:
        raise error

    total = Decimal(0)
    pos = 0
    while pos < len(body):
        match = _COMPONENT.match(body, pos)
        if match is None or match.group(1) in ("", "."):
            raise error
        total += Decimal(match.group(1)) * _UNITS[match.group(2)]
        pos = match.end()

    nanos = int(total)
    if nanos > _MAX_NANOS + (1 if negative else 0):
        raise error
    delta = timedelta(microseconds=nanos // 1000)
    return -delta if negative else delta


def _timestamp(match: re.Match, tz: timezone) -> datetime:
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    return datetime(year, month, day, hour, minute, second, tzinfo=tz)


def parse_time(raw_time: str, now: datetime | None = None) -> datetime:
    """Parse a duration relative to now, or a ``YYYY-MM-DD HH:MM:SS [TZ]`` timestamp.

    Timestamps without a zone are UTC; a zone abbreviation is kept as its name
    with a zero offset.
    """
    try:
        duration = parse_duration(raw_time.lower())
    except ValueError:
        pass
    else:
        return (now if now is not None else datetime.now(timezone.utc)) + duration

    for pattern in (_TIME, _TIME_WITH_ZONE):
        match = pattern.fullmatch(raw_time)
        if match is None:
            continue
        tz = timezone.utc
        if pattern is _TIME_WITH_ZONE and match.group(7) != "UTC":
            tz = timezone(timedelta(0), match.group(7))
        try:
            return _timestamp(match, tz)
        except ValueError:
            break

    raise ValueError(f"Could not parse {raw_time}")


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.replace(microsecond=0).isoformat()
    if moment.utcoffset() == timedelta(0):
        return text[:-6] + "Z"
    return text


@dataclass
class GetLogsOperation:
    """A request to show logs, with the state kept while following them."""

    log_group_name: str
    namespace: str = ""
    end_time: datetime | None = None
    filter: str = ""
    follow: bool = False
    log_stream_colors: dict[str, int] = field(default_factory=dict)
    log_stream_names: list[str] = field(default_factory=list)
    start_time: datetime | None = None
    event_cache: OrderedDict = field(default_factory=OrderedDict, repr=False)
    include_time: bool = False
    no_log_stream_prefix: bool = False
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def add_start_time(self, raw_start_time: str) -> None:
        if raw_start_time:
            self.start_time = parse_time(raw_start_time)

    def add_end_time(self, raw_end_time: str) -> None:
        if raw_end_time:
            self.end_time = parse_time(raw_end_time)

    def add_tasks(self, tasks) -> None:
        """Restrict the logs to the streams of the given task IDs."""
        self.log_stream_names.extend(
            LOG_STREAM_NAME_FORMAT % (self.namespace, task) for task in tasks
        )

    def validate(self) -> None:
        if self.follow and self.end_time is not None:
            raise ValueError("--end-time cannot be specified if following")

    def get_stream_color(self, log_stream_name: str) -> int:
        """Return a random 256-colour code that stays fixed for the stream."""
        if not self.log_stream_colors.get(log_stream_name):
            self.log_stream_colors[log_stream_name] = self.rng.randrange(256)
        return self.log_stream_colors[log_stream_name]

    def seen_event(self, event_id: str) -> bool:
        """Record the event and report whether it had been recorded already."""
        if event_id in self.event_cache:
            return True
        self.event_cache[event_id] = None
        while len(self.event_cache) > EVENT_CACHE_SIZE:
            self.event_cache.popitem(last=False)
        return False


def get_logs(operation: GetLogsOperation, logs_client: CloudWatchLogs, emit: Emit) -> None:
    """Fetch the operation's logs once and emit every event not seen before.

    ``emit`` receives the stream name, message, colour, formatted time (empty
    unless times are included) and whether to leave out the stream prefix.
    """
    request = GetLogsInput(
        log_group_name=operation.log_group_name,
        filter=operation.filter,
        log_stream_names=list(operation.log_stream_names),
        start_time=operation.start_time,
        end_time=operation.end_time,
    )
    for line in logs_client.get_logs(request):
        log_time = _rfc3339(line.timestamp) if operation.include_time else ""
        color = operation.get_stream_color(line.log_stream_name)
        if not operation.seen_event(line.event_id):
            emit(line.log_stream_name, line.message, color, log_time,
                 operation.no_log_stream_prefix)


def follow_logs(
    operation: GetLogsOperation,
    logs_client: CloudWatchLogs,
    emit: Emit,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Poll for new events every second until interrupted."""
    if operation.start_time is None:
        operation.start_time = datetime.now(timezone.utc)
    while True:
        get_logs(operation, logs_client, emit)
        new_start = datetime.now(timezone.utc) - FOLLOW_OVERLAP
        if new_start > operation.start_time:
            operation.start_time = new_start
        sleep(1)