"""Reading and creating CloudWatch Logs log groups."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

RESOURCE_ALREADY_EXISTS = "ResourceAlreadyExistsException"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ServiceError(Exception):
    """A call to the logs service failed."""

    def __init__(self, message: str, code: str = "") -> None:
        super().__init__(message)
        self.code = code


@dataclass
class GetLogsInput:
    """What to fetch from a log group."""

    log_group_name: str
    filter: str = ""
    log_stream_names: list[str] = field(default_factory=list)
    end_time: datetime | None = None
    start_time: datetime | None = None


@dataclass(frozen=True)
class LogLine:
    """One log event."""

    event_id: str
    log_stream_name: str
    message: str
    timestamp: datetime


def _error_code(exc: BaseException) -> str | None:
    code = getattr(exc, "code", None)
    if isinstance(code, str):
        return code
    response = getattr(exc, "response", None)
    if isinstance(response, dict):
        return (response.get("Error") or {}).get("Code")
    return None


def _to_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _EPOCH) // timedelta(milliseconds=1)


class CloudWatchLogs:
    """Access to CloudWatch Logs through a boto3-style client object."""

    def __init__(self, client: Any) -> None:
        self._client = client

    def create_log_group(self, log_group_name: str, *args: Any) -> str:
        """Create a log group (a %-format filled with args) and return its name.

        A group that already exists is not an error.
        """
        name = log_group_name % args if args else log_group_name
        try:
            self._client.create_log_group(logGroupName=name)
        except Exception as exc:
            code = _error_code(exc)
            if code == RESOURCE_ALREADY_EXISTS:
                return name
            raise ServiceError(
                "Could not create Cloudwatch Logs log group", code or ""
            ) from exc
        return name

    def get_logs(self, logs_input: GetLogsInput) -> list[LogLine]:
        """Return all matching events of the log group, interleaved across streams."""
        request: dict[str, Any] = {
            "logGroupName": logs_input.log_group_name,
            "interleaved": True,
        }
        if logs_input.start_time is not None:
            request["startTime"] = _to_millis(logs_input.start_time)
        if logs_input.end_time is not None:
            request["endTime"] = _to_millis(logs_input.end_time)
        if logs_input.filter:
            request["filterPattern"] = logs_input.filter
        if logs_input.log_stream_names:
            request["logStreamNames"] = list(logs_input.log_stream_names)

        lines: list[LogLine] = []
        try:
            paginator = self._client.get_paginator("filter_log_events")
            for page in paginator.paginate(**request):
                for event in page.get("events") or []:
                    lines.append(
                        LogLine(
                            event_id=event.get("eventId") or "",
                            log_stream_name=event.get("logStreamName") or "",
                            message=event.get("message") or "",
                            timestamp=_EPOCH
                            + timedelta(milliseconds=event.get("timestamp") or 0),
                        )
                    )
        except Exception as exc:
            raise ServiceError(
                f"Could not get logs for: {logs_input.log_group_name}",
                _error_code(exc) or "",
            ) from exc
        return lines