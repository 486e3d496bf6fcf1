import yaml
import os
from typing import Optional
from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    url: str


class ScoringConfig(BaseModel):
    """
    Configuration for application intake scoring.

    Formula weights live in the scorer itself; these are the decision
    thresholds and the lookback windows used to gather risk inputs.
    """
    manual_review_threshold: int = 45
    block_threshold: int = 72
    velocity_window_minutes: int = 15
    abuse_lookback_hours: int = 24
    answer_max_chars: int = 220


class PipelineConfig(BaseModel):
    default_apply_limit: int = 3
    default_rebalance_limit: int = 2


class EmailProviderConfig(BaseModel):
    """Email channel provider settings. 'log' accepts everything and only logs."""
    provider: str = "log"  # log | resend | smtp
    from_email: str = "alerts@meritboard.dev"
    resend_api_key: Optional[str] = None
    resend_api_url: str = "https://api.resend.com/emails"
    smtp_server: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    timeout_seconds: int = 30


class PushProviderConfig(BaseModel):
    provider: str = "log"  # log | webhook
    webhook_url: Optional[str] = None
    webhook_auth_token: Optional[str] = None
    timeout_seconds: int = 30


class AuditConfig(BaseModel):
    """Outbound audit events. Without outbound_url events are recorded as skipped."""
    outbound_url: Optional[str] = None
    shared_secret: Optional[str] = None
    source: str = "meritboard.alerts"
    timeout_seconds: int = 10


class AlertsConfig(BaseModel):
    brand_name: str = "MeritBoard"
    email: EmailProviderConfig = Field(default_factory=EmailProviderConfig)
    push: PushProviderConfig = Field(default_factory=PushProviderConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)


class AppConfig(BaseModel):
    database: DatabaseConfig
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    alerts: AlertsConfig = Field(default_factory=AlertsConfig)


# env var -> (section path inside the YAML document)
_ENV_OVERRIDES = {
    "EMAIL_PROVIDER": ("alerts", "email", "provider"),
    "RESEND_API_KEY": ("alerts", "email", "resend_api_key"),
    "EMAIL_FROM": ("alerts", "email", "from_email"),
    "PUSH_PROVIDER": ("alerts", "push", "provider"),
    "PUSH_WEBHOOK_URL": ("alerts", "push", "webhook_url"),
    "PUSH_WEBHOOK_AUTH_TOKEN": ("alerts", "push", "webhook_auth_token"),
    "WEBHOOK_OUTBOUND_URL": ("alerts", "audit", "outbound_url"),
    "WEBHOOK_SHARED_SECRET": ("alerts", "audit", "shared_secret"),
}


def _set_path(data: dict, path: tuple, value: str) -> None:
    node = data
    for key in path[:-1]:
        if not isinstance(node.get(key), dict):
            node[key] = {}
        node = node[key]
    node[path[-1]] = value


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from root), try absolute or adjusted path
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    # Allow env var override for DB URL
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        if not isinstance(data.get('database'), dict):
            data['database'] = {}
        data['database']['url'] = env_db_url

    for env_name, path in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name, "").strip()
        if value:
            if env_name.endswith("_PROVIDER"):
                value = value.lower()
            _set_path(data, path, value)

    return AppConfig(**data)
