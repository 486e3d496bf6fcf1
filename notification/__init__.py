"""
Notification Module

Saved-search alert delivery over email, in-app and push channels, with
delivery logging and outbound audit events.

Usage:
    from notification import AlertDeliveryService, DeliveryScope

    service = AlertDeliveryService(config.alerts)
    with marketplace_uow() as repo:
        summary = service.run(repo, DeliveryScope.ALL)

    # Get providers directly
    providers = ChannelProviderFactory.build(config.alerts)
    providers.email.send('user@example.com', 'Subject', 'Body', {})
"""

from notification.channels import (
    AlertChannel,
    DeliveryResult,
    ChannelProvider,
    ChannelProviders,
    ChannelProviderFactory,
    LogEmailProvider,
    ResendEmailProvider,
    SmtpEmailProvider,
    LogPushProvider,
    WebhookPushProvider,
    InAppProvider,
)

from notification.audit import AuditEmitter, AuditOutcome, build_signature

from notification.message_builder import NotificationMessageBuilder, AlertMessage

from notification.models import (
    AlertKind,
    DeliveryCounts,
    DeliveryPreview,
    DeliveryRunSummary,
    DeliveryScope,
    PendingAlerts,
)

from notification.schedule import normalize_cadence, is_digest_due

from notification.service import AlertDeliveryService

__all__ = [
    # Channels
    'AlertChannel',
    'DeliveryResult',
    'ChannelProvider',
    'ChannelProviders',
    'ChannelProviderFactory',
    'LogEmailProvider',
    'ResendEmailProvider',
    'SmtpEmailProvider',
    'LogPushProvider',
    'WebhookPushProvider',
    'InAppProvider',

    # Audit
    'AuditEmitter',
    'AuditOutcome',
    'build_signature',

    # Messages
    'NotificationMessageBuilder',
    'AlertMessage',

    # Delivery
    'AlertKind',
    'DeliveryCounts',
    'DeliveryPreview',
    'DeliveryRunSummary',
    'DeliveryScope',
    'PendingAlerts',
    'normalize_cadence',
    'is_digest_due',
    'AlertDeliveryService',
]
