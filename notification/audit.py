"""Outbound audit events for alert deliveries, signed and POSTed to an integration webhook."""

import hashlib
import hmac
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_fixed,
    retry_if_exception,
    before_sleep_log
)

from core.config_loader import AuditConfig
from core.utils import utc_now
from database.repository import MarketplaceRepository

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-MeritBoard-Signature"
NOTE_MAX_CHARS = 500


def _is_retryable_error(exc: Exception) -> bool:
    """Retry timeouts, connection failures and 5xx responses only."""
    if isinstance(exc, (requests.Timeout, requests.ConnectionError)):
        return True
    if isinstance(exc, requests.HTTPError):
        response = getattr(exc, 'response', None)
        return response is not None and response.status_code >= 500
    return False


def build_signature(raw_payload: str, secret: str) -> str:
    digest = hmac.new(secret.encode('utf-8'), raw_payload.encode('utf-8'), hashlib.sha256).hexdigest()
    return f"sha256={digest}"


@dataclass
class AuditOutcome:
    status: str  # delivered|failed|skipped
    http_status: Optional[int] = None
    note: Optional[str] = None


class AuditEmitter:
    """
    Records every outbound event as a WebhookEvent before attempting delivery,
    then stores the outcome on the same row.

    Transport failures are recorded, not raised. Store errors propagate; the
    delivery engine decides whether to swallow them.
    """

    def __init__(self, config: Optional[AuditConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or AuditConfig()
        self.session = session or requests.Session()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(1),
        retry=retry_if_exception(_is_retryable_error),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    def _post(self, url: str, raw_payload: str, signature: Optional[str]) -> requests.Response:
        headers = {'Content-Type': 'application/json'}
        if signature:
            headers[SIGNATURE_HEADER] = signature
        response = self.session.post(url, data=raw_payload, headers=headers, timeout=self.config.timeout_seconds)
        if response.status_code >= 500:
            response.raise_for_status()
        return response

    def _deliver(self, raw_payload: str, signature: Optional[str]) -> AuditOutcome:
        url = (self.config.outbound_url or '').strip()
        if not url:
            return AuditOutcome(status='skipped', note="WEBHOOK_OUTBOUND_URL is not configured")

        try:
            response = self._post(url, raw_payload, signature)
        except requests.HTTPError as e:
            response = e.response
            return AuditOutcome(
                status='failed',
                http_status=response.status_code if response is not None else None,
                note=(response.text if response is not None else str(e))[:NOTE_MAX_CHARS]
            )
        except requests.RequestException as e:
            return AuditOutcome(status='failed', note=str(e)[:NOTE_MAX_CHARS])

        if response.ok:
            return AuditOutcome(status='delivered', http_status=response.status_code)
        return AuditOutcome(
            status='failed',
            http_status=response.status_code,
            note=response.text[:NOTE_MAX_CHARS]
        )

    def emit(self, repo: MarketplaceRepository, event_type: str, payload: Dict[str, Any]) -> AuditOutcome:
        occurred_at = utc_now()
        source = (self.config.source or '').strip() or 'meritboard'
        envelope = {
            'source': source,
            'eventType': event_type,
            'occurredAt': occurred_at.isoformat(),
            'payload': payload,
        }
        raw_payload = json.dumps(envelope, default=str)
        signature = build_signature(raw_payload, self.config.shared_secret) if self.config.shared_secret else None

        event = repo.webhooks.create_outbound(
            source=source,
            event_type=event_type,
            payload=raw_payload,
            signature=signature,
            delivery_url=(self.config.outbound_url or '').strip() or None,
            received_at=occurred_at
        )

        outcome = self._deliver(raw_payload, signature)
        repo.webhooks.record_outcome(
            event,
            status=outcome.status,
            http_status=outcome.http_status,
            note=outcome.note,
            processed_at=utc_now()
        )

        if outcome.status == 'failed':
            logger.warning(f"Audit event {event_type} not delivered: {outcome.note}")
        else:
            logger.debug(f"Audit event {event_type}: {outcome.status}")
        return outcome
