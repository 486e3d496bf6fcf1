#!/usr/bin/env python3
"""
Alert Delivery Service - cadence-aware delivery of saved-search job alerts.

Usage:
    from notification.service import AlertDeliveryService
    from notification.models import DeliveryScope

    service = AlertDeliveryService(config.alerts)
    with marketplace_uow() as repo:
        preview = service.preview(repo, DeliveryScope.SELF, user_id="u1")
        summary = service.run(repo, DeliveryScope.ALL)

Rules applied by run():
- instant searches: one email per alert, one batched in-app entry, and one
  push per alert (or one batched push when push is deferred)
- daily/weekly searches whose digest is due: one batched message per channel,
  then last_digest_at moves to the run time
- every message attempt writes one delivery log row and emits an audit event
- a channel marker is set only when the provider accepted the message, so
  rejected alerts stay pending and are retried by the next run

Searches and channels are processed one after another. Provider rejections
never stop the run; only provider misconfiguration is raised, and it is
raised before anything is sent.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.config_loader import AlertsConfig
from core.utils import utc_now, mask_email
from database.models import JobAlert, SavedSearch
from database.repository import MarketplaceRepository
from notification.audit import AuditEmitter
from notification.channels import (
    AlertChannel,
    ChannelProviderFactory,
    ChannelProviders,
    DeliveryResult,
)
from notification.message_builder import AlertMessage, NotificationMessageBuilder
from notification.models import (
    AlertKind,
    DeliveryPreview,
    DeliveryRunSummary,
    DeliveryScope,
    PendingAlerts,
)
from notification.schedule import INSTANT, is_digest_due, normalize_cadence

logger = logging.getLogger(__name__)

AUDIT_EVENT_TYPES = {
    (AlertChannel.EMAIL, AlertKind.INSTANT): 'alerts.delivery.instant',
    (AlertChannel.EMAIL, AlertKind.DIGEST): 'alerts.delivery.digest',
    (AlertChannel.PUSH, AlertKind.INSTANT): 'alerts.delivery.push',
    (AlertChannel.PUSH, AlertKind.DIGEST): 'alerts.delivery.push',
    (AlertChannel.IN_APP, AlertKind.INSTANT): 'alerts.delivery.in_app',
    (AlertChannel.IN_APP, AlertKind.DIGEST): 'alerts.delivery.in_app',
}


class AlertDeliveryService:
    def __init__(
        self,
        config: Optional[AlertsConfig] = None,
        providers: Optional[ChannelProviders] = None,
        audit_emitter: Optional[AuditEmitter] = None
    ):
        self.config = config or AlertsConfig()
        self._providers = providers
        self.audit_emitter = audit_emitter if audit_emitter is not None else AuditEmitter(self.config.audit)
        self.messages = NotificationMessageBuilder(self.config.brand_name)

    @property
    def providers(self) -> ChannelProviders:
        """Built on first use; raises ChannelConfigurationError for a bad provider selection."""
        if self._providers is None:
            self._providers = ChannelProviderFactory.build(self.config)
        return self._providers

    def _load_searches(
        self,
        repo: MarketplaceRepository,
        scope: DeliveryScope,
        user_id: Optional[str]
    ) -> List[SavedSearch]:
        if scope == DeliveryScope.SELF:
            if not user_id:
                return []
            return repo.alerts.list_deliverable_searches(user_id)
        return repo.alerts.list_deliverable_searches()

    # ============ Preview ============

    def preview(
        self,
        repo: MarketplaceRepository,
        scope: DeliveryScope,
        user_id: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> DeliveryPreview:
        """Read-only: counts what a run would do at `now` without touching any marker."""
        now = now or utc_now()
        preview = DeliveryPreview(scope=scope, generated_at=now)

        for search in self._load_searches(repo, scope, user_id):
            pending = PendingAlerts.for_search(search, repo.alerts.list_unsent_alerts(search.id))
            unique_count = pending.unique_count
            if not unique_count:
                continue

            preview.pending_alerts += unique_count
            channel_counts = pending.counts_by_channel()
            for name, count in channel_counts.items():
                preview.pending_by_channel[name] += count

            cadence = normalize_cadence(search.digest_cadence)
            if cadence == INSTANT:
                preview.pending_instant += unique_count
            elif is_digest_due(cadence, search.digest_hour, search.last_digest_at, now, search.timezone):
                preview.due_digest_searches += 1
            else:
                preview.waiting_digest_searches += 1
                continue

            for name, count in channel_counts.items():
                preview.deliverable_by_channel[name] += count

        return preview

    # ============ Run ============

    def run(
        self,
        repo: MarketplaceRepository,
        scope: DeliveryScope,
        user_id: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> DeliveryRunSummary:
        now = now or utc_now()
        providers = self.providers
        summary = DeliveryRunSummary(scope=scope, run_at=now)

        for search in self._load_searches(repo, scope, user_id):
            summary.searches_scanned += 1
            pending = PendingAlerts.for_search(search, repo.alerts.list_unsent_alerts(search.id))
            if not pending.unique_count:
                continue

            cadence = normalize_cadence(search.digest_cadence)
            if cadence == INSTANT:
                self._deliver_instant(repo, providers, search, pending, now, summary)
                continue

            if not is_digest_due(cadence, search.digest_hour, search.last_digest_at, now, search.timezone):
                summary.waiting_digest_searches += 1
                continue

            self._deliver_digest(repo, providers, search, cadence, pending, now, summary)
            repo.alerts.advance_last_digest(search, now)
            summary.digest_runs += 1

        logger.info(
            f"Alert delivery ({scope.value}): scanned={summary.searches_scanned} "
            f"attempted={summary.totals.attempted} delivered={summary.totals.delivered} "
            f"failed={summary.totals.failed} logs={summary.logs_created}"
        )
        return summary

    def _deliver_instant(
        self,
        repo: MarketplaceRepository,
        providers: ChannelProviders,
        search: SavedSearch,
        pending: PendingAlerts,
        now: datetime,
        summary: DeliveryRunSummary
    ) -> None:
        for alert in pending.email:
            self._deliver(
                repo, providers, search, AlertChannel.EMAIL, AlertKind.INSTANT, [alert],
                self.messages.build_instant_email(alert),
                metadata={'savedSearchId': search.id, 'alertId': alert.id},
                now=now, summary=summary
            )

        if pending.in_app:
            self._deliver(
                repo, providers, search, AlertChannel.IN_APP, AlertKind.INSTANT, pending.in_app,
                self.messages.build_in_app_instant(search.label, len(pending.in_app)),
                metadata={'savedSearchId': search.id},
                now=now, summary=summary
            )

        if not pending.push:
            return

        if search.push_deferred:
            self._deliver(
                repo, providers, search, AlertChannel.PUSH, AlertKind.DIGEST, pending.push,
                self.messages.build_push_digest(search.label, INSTANT, pending.push),
                metadata={
                    'savedSearchId': search.id,
                    'alertIds': [alert.id for alert in pending.push],
                    'digestCadence': INSTANT,
                },
                now=now, summary=summary
            )
            return

        for alert in pending.push:
            self._deliver(
                repo, providers, search, AlertChannel.PUSH, AlertKind.INSTANT, [alert],
                self.messages.build_instant_push(alert, search.label),
                metadata={'savedSearchId': search.id, 'alertId': alert.id, 'jobTitle': alert.job.title},
                now=now, summary=summary
            )

    def _deliver_digest(
        self,
        repo: MarketplaceRepository,
        providers: ChannelProviders,
        search: SavedSearch,
        cadence: str,
        pending: PendingAlerts,
        now: datetime,
        summary: DeliveryRunSummary
    ) -> None:
        if pending.email:
            self._deliver(
                repo, providers, search, AlertChannel.EMAIL, AlertKind.DIGEST, pending.email,
                self.messages.build_digest_email(search.label, cadence, pending.email),
                metadata={'savedSearchId': search.id, 'digestCadence': cadence},
                now=now, summary=summary
            )

        if pending.in_app:
            self._deliver(
                repo, providers, search, AlertChannel.IN_APP, AlertKind.DIGEST, pending.in_app,
                self.messages.build_in_app_digest(search.label, cadence, pending.in_app),
                metadata={'savedSearchId': search.id, 'digestCadence': cadence},
                now=now, summary=summary
            )

        if pending.push:
            self._deliver(
                repo, providers, search, AlertChannel.PUSH, AlertKind.DIGEST, pending.push,
                self.messages.build_push_digest(search.label, cadence, pending.push),
                metadata={
                    'savedSearchId': search.id,
                    'alertIds': [alert.id for alert in pending.push],
                    'digestCadence': cadence,
                },
                now=now, summary=summary
            )

    def _deliver(
        self,
        repo: MarketplaceRepository,
        providers: ChannelProviders,
        search: SavedSearch,
        channel: AlertChannel,
        kind: AlertKind,
        alerts: List[JobAlert],
        message: AlertMessage,
        metadata: Dict[str, Any],
        now: datetime,
        summary: DeliveryRunSummary
    ) -> None:
        """Send one message covering `alerts`, log it, mark on acceptance, then audit."""
        provider = providers.for_channel(channel)
        if channel == AlertChannel.IN_APP:
            recipient = f"user:{search.user_id}"
        else:
            recipient = search.user.email

        try:
            result = provider.send(recipient, message.subject, message.body, metadata)
        except Exception as e:
            logger.error(f"{channel.value} provider {provider.provider_name} raised for {mask_email(recipient)}: {e}")
            result = DeliveryResult(provider=provider.provider_name, accepted=False, error=str(e))

        alert_ids = [alert.id for alert in alerts]
        single = len(alerts) == 1 and kind == AlertKind.INSTANT
        log = repo.alerts.add_delivery_log(
            user_id=search.user_id,
            alert_id=alert_ids[0] if single else None,
            saved_search_id=search.id,
            channel=channel.value,
            kind=kind.value,
            provider=result.provider,
            provider_message_id=result.provider_message_id,
            accepted=result.accepted,
            error_message=result.error,
            recipient=recipient,
            subject=message.subject,
            payload=message.body,
            extra={} if single else {'alert_ids': alert_ids},
            delivered_at=now
        )

        if result.accepted:
            repo.alerts.mark_sent(alerts, channel.value, now)
        else:
            logger.warning(
                f"{channel.value} {kind.value} delivery to {mask_email(recipient)} not accepted "
                f"(search {search.id}, {len(alerts)} alerts): {result.error}"
            )

        summary.record(channel, kind, len(alerts), result.accepted)

        audit_payload = {
            'deliveryLogId': log.id,
            'savedSearchId': search.id,
            'channel': channel.value,
            'kind': kind.value,
            'recipient': recipient,
            'provider': result.provider,
            'accepted': result.accepted,
            'providerMessageId': result.provider_message_id,
            'error': result.error,
        }
        if single:
            audit_payload['alertId'] = alert_ids[0]
        else:
            audit_payload['alertIds'] = alert_ids
        self._emit_audit(repo, AUDIT_EVENT_TYPES[(channel, kind)], audit_payload)

    def _emit_audit(self, repo: MarketplaceRepository, event_type: str, payload: Dict[str, Any]) -> None:
        # Audit rows go in their own savepoint; a store error there leaves the delivery rows intact.
        try:
            with repo.db.begin_nested():
                self.audit_emitter.emit(repo, event_type, payload)
        except Exception as e:
            logger.error(f"Audit emit failed for {event_type}: {e}")
