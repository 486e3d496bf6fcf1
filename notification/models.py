#!/usr/bin/env python3
"""
Alert Delivery Models - pending alert grouping, preview and run summary.

Counts are in alert units: a digest that batches four alerts into one message
is four attempted alerts. This keeps a preview's deliverable counts equal to
the attempted counts of a run made right after it. Messages sent are
reflected in logs_created instead.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List

from database.models import JobAlert, SavedSearch
from database.repositories import SENT_COLUMNS
from notification.channels import AlertChannel


class DeliveryScope(Enum):
    """self: the caller's saved searches. all: every user's."""
    SELF = "self"
    ALL = "all"


class AlertKind(Enum):
    INSTANT = "instant"
    DIGEST = "digest"


@dataclass
class PendingAlerts:
    """Unsent alerts of one saved search, split by enabled channel."""
    email: List[JobAlert] = field(default_factory=list)
    in_app: List[JobAlert] = field(default_factory=list)
    push: List[JobAlert] = field(default_factory=list)

    @classmethod
    def for_search(cls, search: SavedSearch, alerts: List[JobAlert]) -> "PendingAlerts":
        def unsent(enabled: bool, channel: AlertChannel) -> List[JobAlert]:
            if not enabled:
                return []
            column = SENT_COLUMNS[channel.value]
            return [alert for alert in alerts if getattr(alert, column) is None]

        return cls(
            email=unsent(search.email_enabled, AlertChannel.EMAIL),
            in_app=unsent(search.in_app_enabled, AlertChannel.IN_APP),
            push=unsent(search.push_enabled, AlertChannel.PUSH),
        )

    def for_channel(self, channel: AlertChannel) -> List[JobAlert]:
        return getattr(self, channel.value)

    @property
    def unique_count(self) -> int:
        return len({alert.id for alert in self.email + self.in_app + self.push})

    def counts_by_channel(self) -> Dict[str, int]:
        return {channel.value: len(self.for_channel(channel)) for channel in AlertChannel}


def _empty_channel_counts() -> Dict[str, int]:
    return {channel.value: 0 for channel in AlertChannel}


@dataclass
class DeliveryPreview:
    """
    pending_* cover every saved search in scope. deliverable_* cover only the
    ones a run would act on now (instant, or digest due).
    """
    scope: DeliveryScope
    generated_at: datetime
    pending_alerts: int = 0
    pending_by_channel: Dict[str, int] = field(default_factory=_empty_channel_counts)
    pending_instant: int = 0
    deliverable_by_channel: Dict[str, int] = field(default_factory=_empty_channel_counts)
    due_digest_searches: int = 0
    waiting_digest_searches: int = 0

    @property
    def deliverable_alerts(self) -> int:
        return sum(self.deliverable_by_channel.values())


@dataclass
class DeliveryCounts:
    attempted: int = 0
    delivered: int = 0
    failed: int = 0

    def record(self, alert_count: int, accepted: bool) -> None:
        self.attempted += alert_count
        if accepted:
            self.delivered += alert_count
        else:
            self.failed += alert_count


@dataclass
class DeliveryRunSummary:
    scope: DeliveryScope
    run_at: datetime
    searches_scanned: int = 0
    totals: DeliveryCounts = field(default_factory=DeliveryCounts)
    by_kind: Dict[str, DeliveryCounts] = field(
        default_factory=lambda: {kind.value: DeliveryCounts() for kind in AlertKind}
    )
    by_channel: Dict[str, DeliveryCounts] = field(
        default_factory=lambda: {channel.value: DeliveryCounts() for channel in AlertChannel}
    )
    digest_runs: int = 0
    logs_created: int = 0
    waiting_digest_searches: int = 0

    def record(self, channel: AlertChannel, kind: AlertKind, alert_count: int, accepted: bool) -> None:
        self.totals.record(alert_count, accepted)
        self.by_kind[kind.value].record(alert_count, accepted)
        self.by_channel[channel.value].record(alert_count, accepted)
        self.logs_created += 1

    @property
    def attempted_by_channel(self) -> Dict[str, int]:
        return {name: counts.attempted for name, counts in self.by_channel.items()}
