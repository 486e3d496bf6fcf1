#!/usr/bin/env python3
"""
Alert Channels

The delivery engine works with a closed set of channels (email, in-app,
push). Each channel is backed by a provider implementing the same contract:

    provider.send(recipient, subject, body, metadata) -> DeliveryResult

Providers never raise on a rejected or failed send; they report it through
DeliveryResult. Misconfiguration is detected up front by validate_config(),
which raises ChannelConfigurationError.

Usage:
    from notification.channels import ChannelProviderFactory

    providers = ChannelProviderFactory.build(config.alerts)
    result = providers.email.send('user@example.com', 'Subject', 'Body', {})
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional
import logging
import smtplib
import time
import uuid
from email.mime.text import MIMEText
from email.utils import make_msgid

import requests

from core.config_loader import AlertsConfig, EmailProviderConfig, PushProviderConfig
from core.exceptions import ChannelConfigurationError
from core.utils import mask_email

logger = logging.getLogger(__name__)


class AlertChannel(Enum):
    EMAIL = "email"
    IN_APP = "in_app"
    PUSH = "push"


@dataclass
class DeliveryResult:
    provider: str
    accepted: bool
    provider_message_id: Optional[str] = None
    error: Optional[str] = None


def _log_message_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


class ChannelProvider(ABC):
    """
    Abstract base class for channel providers.

    All providers implement this interface so the delivery engine can dispatch
    on AlertChannel without knowing which transport sits behind it.
    """

    channel: AlertChannel

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider identifier recorded in delivery logs."""
        pass

    @abstractmethod
    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> DeliveryResult:
        """
        Send one message.

        Args:
            recipient: Target recipient (email address for email and push)
            subject: Subject line or push title
            body: Plain-text body
            metadata: Channel-specific structured data

        Returns:
            DeliveryResult; accepted is True only if the provider took the message
        """
        pass

    def validate_config(self) -> None:
        """Raise ChannelConfigurationError if the provider cannot be used."""
        return None


# ============ Email ============

class LogEmailProvider(ChannelProvider):
    """Accepts every message and only logs it. Default for development."""

    channel = AlertChannel.EMAIL

    @property
    def provider_name(self) -> str:
        return 'log'

    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> DeliveryResult:
        message_id = _log_message_id('log')
        logger.info(f"[email:log] to={mask_email(recipient)} subject={subject} id={message_id}")
        return DeliveryResult(provider=self.provider_name, accepted=True, provider_message_id=message_id)


class ResendEmailProvider(ChannelProvider):
    """Email via the Resend HTTP API."""

    channel = AlertChannel.EMAIL

    def __init__(self, config: EmailProviderConfig):
        self.config = config

    @property
    def provider_name(self) -> str:
        return 'resend'

    def validate_config(self) -> None:
        if not (self.config.resend_api_key or '').strip():
            raise ChannelConfigurationError('email', self.provider_name, "RESEND_API_KEY is not set")

    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> DeliveryResult:
        try:
            response = requests.post(
                self.config.resend_api_url,
                json={
                    'from': self.config.from_email,
                    'to': recipient,
                    'subject': subject,
                    'text': body,
                },
                headers={
                    'Authorization': f"Bearer {self.config.resend_api_key}",
                    'Content-Type': 'application/json',
                },
                timeout=self.config.timeout_seconds
            )
        except requests.RequestException as e:
            logger.error(f"Failed to send email to {mask_email(recipient)}: {e}")
            return DeliveryResult(provider=self.provider_name, accepted=False, error=str(e))

        if not response.ok:
            error = f"Resend API {response.status_code}: {response.text[:300]}"
            logger.error(f"Email to {mask_email(recipient)} rejected: {error}")
            return DeliveryResult(provider=self.provider_name, accepted=False, error=error)

        try:
            message_id = response.json().get('id')
        except ValueError:
            message_id = None

        logger.info(f"Email sent to {mask_email(recipient)}")
        return DeliveryResult(provider=self.provider_name, accepted=True, provider_message_id=message_id)


class SmtpEmailProvider(ChannelProvider):
    """Email via SMTP with STARTTLS."""

    channel = AlertChannel.EMAIL

    def __init__(self, config: EmailProviderConfig):
        self.config = config

    @property
    def provider_name(self) -> str:
        return 'smtp'

    def validate_config(self) -> None:
        missing = [
            name for name in ('smtp_server', 'smtp_username', 'smtp_password')
            if not getattr(self.config, name)
        ]
        if missing:
            raise ChannelConfigurationError('email', self.provider_name, f"missing settings: {', '.join(missing)}")

    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> DeliveryResult:
        message_id = make_msgid()
        msg = MIMEText(body, 'plain', 'utf-8')
        msg['From'] = self.config.from_email
        msg['To'] = recipient
        msg['Subject'] = subject
        msg['Message-ID'] = message_id

        try:
            with smtplib.SMTP(self.config.smtp_server, self.config.smtp_port,
                              timeout=self.config.timeout_seconds) as server:
                server.starttls()
                server.login(self.config.smtp_username, self.config.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {mask_email(recipient)}: {e}")
            return DeliveryResult(provider=self.provider_name, accepted=False, error=str(e))

        logger.info(f"Email sent to {mask_email(recipient)}")
        return DeliveryResult(provider=self.provider_name, accepted=True, provider_message_id=message_id)


# ============ Push ============

class LogPushProvider(ChannelProvider):
    channel = AlertChannel.PUSH

    @property
    def provider_name(self) -> str:
        return 'log'

    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> DeliveryResult:
        message_id = _log_message_id('push')
        logger.info(f"[push:log] to={mask_email(recipient)} title={subject} id={message_id}")
        return DeliveryResult(provider=self.provider_name, accepted=True, provider_message_id=message_id)


class WebhookPushProvider(ChannelProvider):
    """Push via a JSON webhook relay, optionally with a bearer token."""

    channel = AlertChannel.PUSH

    def __init__(self, config: PushProviderConfig, source: str = 'meritboard'):
        self.config = config
        self.source = source

    @property
    def provider_name(self) -> str:
        return 'webhook'

    def validate_config(self) -> None:
        if not (self.config.webhook_url or '').strip():
            raise ChannelConfigurationError('push', self.provider_name, "PUSH_WEBHOOK_URL is not set")

    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> DeliveryResult:
        headers = {'Content-Type': 'application/json'}
        if self.config.webhook_auth_token:
            headers['Authorization'] = f"Bearer {self.config.webhook_auth_token}"

        payload = {
            'to': recipient,
            'title': subject,
            'body': body,
            'data': metadata or {},
            'sentAt': datetime.now(timezone.utc).isoformat(),
            'source': self.source,
        }

        try:
            response = requests.post(
                self.config.webhook_url,
                json=payload,
                headers=headers,
                timeout=self.config.timeout_seconds
            )
        except requests.RequestException as e:
            logger.error(f"Failed to send push to {mask_email(recipient)}: {e}")
            return DeliveryResult(provider=self.provider_name, accepted=False, error=str(e))

        if not response.ok:
            error = f"Push webhook {response.status_code}: {response.text[:260]}"
            logger.error(f"Push to {mask_email(recipient)} rejected: {error}")
            return DeliveryResult(provider=self.provider_name, accepted=False, error=error)

        try:
            parsed = response.json()
        except ValueError:
            parsed = {}
        message_id = None
        if isinstance(parsed, dict):
            message_id = parsed.get('messageId') or parsed.get('id')

        return DeliveryResult(provider=self.provider_name, accepted=True, provider_message_id=message_id)


# ============ In-app ============

class InAppProvider(ChannelProvider):
    """In-app alerts live in the store; marking them sent is the delivery."""

    channel = AlertChannel.IN_APP

    @property
    def provider_name(self) -> str:
        return 'in_app'

    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> DeliveryResult:
        logger.info(f"[in_app] {recipient}: {subject}")
        return DeliveryResult(provider=self.provider_name, accepted=True)


@dataclass
class ChannelProviders:
    email: ChannelProvider
    in_app: ChannelProvider
    push: ChannelProvider

    def for_channel(self, channel: AlertChannel) -> ChannelProvider:
        if channel == AlertChannel.EMAIL:
            return self.email
        if channel == AlertChannel.IN_APP:
            return self.in_app
        return self.push


class ChannelProviderFactory:
    """
    Builds validated providers from configuration.

    New providers can be registered without touching the factory:
        ChannelProviderFactory.register_provider(AlertChannel.EMAIL, 'ses', SesEmailProvider)
    Registered classes are constructed with the channel's config section.
    """

    _email_providers: Dict[str, type] = {
        'log': LogEmailProvider,
        'resend': ResendEmailProvider,
        'smtp': SmtpEmailProvider,
    }

    _push_providers: Dict[str, type] = {
        'log': LogPushProvider,
        'webhook': WebhookPushProvider,
    }

    @classmethod
    def _instantiate(cls, provider_class: type, config: Any) -> ChannelProvider:
        if provider_class in (LogEmailProvider, LogPushProvider):
            return provider_class()
        return provider_class(config)

    @classmethod
    def get_email_provider(cls, config: EmailProviderConfig) -> ChannelProvider:
        name = (config.provider or 'log').strip().lower()
        provider_class = cls._email_providers.get(name)
        if provider_class is None:
            raise ChannelConfigurationError(
                'email', name, f"unknown provider. Available: {', '.join(cls._email_providers)}"
            )
        provider = cls._instantiate(provider_class, config)
        provider.validate_config()
        return provider

    @classmethod
    def get_push_provider(cls, config: PushProviderConfig) -> ChannelProvider:
        name = (config.provider or 'log').strip().lower()
        provider_class = cls._push_providers.get(name)
        if provider_class is None:
            raise ChannelConfigurationError(
                'push', name, f"unknown provider. Available: {', '.join(cls._push_providers)}"
            )
        provider = cls._instantiate(provider_class, config)
        provider.validate_config()
        return provider

    @classmethod
    def build(cls, config: AlertsConfig) -> ChannelProviders:
        return ChannelProviders(
            email=cls.get_email_provider(config.email),
            in_app=InAppProvider(),
            push=cls.get_push_provider(config.push),
        )

    @classmethod
    def register_provider(cls, channel: AlertChannel, name: str, provider_class: type) -> None:
        if not issubclass(provider_class, ChannelProvider):
            raise ValueError("Provider class must extend ChannelProvider")
        if channel == AlertChannel.EMAIL:
            cls._email_providers[name.lower()] = provider_class
        elif channel == AlertChannel.PUSH:
            cls._push_providers[name.lower()] = provider_class
        else:
            raise ValueError(f"Providers cannot be registered for channel {channel.value}")
        logger.info(f"Registered {channel.value} provider: {name}")
