"""Pointing CloudWatch Events rule targets at a task definition revision."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class EventsError(Exception):
    """A CloudWatch Events operation failed or was given bad input."""


class CloudWatchEvents:
    """Access to CloudWatch Events through a boto3-style client object."""

    def __init__(self, client: Any) -> None:
        self._client = client

    def update_target_revision(self, rule: str, revision: str) -> None:
        """Make the rule's first target run the given task definition ARN."""
        try:
            response = self._client.list_targets_by_rule(Rule=rule)
        except Exception as exc:
            raise EventsError("ListTargetsByRuleInput failed") from exc

        targets = list(response.get("Targets") or [])
        if not targets:
            raise EventsError(f"no targets found for rule: {rule}")

        targets[0].setdefault("EcsParameters", {})["TaskDefinitionArn"] = revision

        try:
            put_response = self._client.put_targets(Rule=rule, Targets=targets)
        except Exception as exc:
            raise EventsError("PutTargets failed") from exc

        if not put_response:
            return
        failed = put_response.get("FailedEntries") or []
        if put_response.get("FailedEntryCount", 0) != 0 and failed:
            details = "\n".join(
                f"TargetId: {entry.get('TargetId')}; "
                f"ErrorCode: {entry.get('ErrorCode')}; "
                f"ErrorMessage: {entry.get('ErrorMessage')}"
                for entry in failed
            )
            raise EventsError(f"PutTargets failed\n{details}")


@dataclass
class EventsTargetOperation:
    """Updating an event rule target to a task definition revision."""

    cluster: str
    task: str
    rule: str
    revision: str
    region: str

    def validate(self) -> None:
        if not self.revision:
            raise EventsError("--revision is required")