from dataclasses import dataclass

from core.config_loader import AppConfig
from core.scorer.persistence import ApplicationIntakeService
from core.pipeline.service import PipelineAutomationService
from notification.audit import AuditEmitter
from notification.service import AlertDeliveryService


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Services are stateless with respect to the store; DB access is obtained
    via marketplace_uow() per operation and the repository passed in.
    """
    config: AppConfig
    intake_service: ApplicationIntakeService
    pipeline_service: PipelineAutomationService
    delivery_service: AlertDeliveryService

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        Channel providers are resolved lazily by the delivery service, so a
        misconfigured provider surfaces on the first delivery run rather
        than here.
        """
        audit_emitter = AuditEmitter(config.alerts.audit)

        return cls(
            config=config,
            intake_service=ApplicationIntakeService(config.scoring),
            pipeline_service=PipelineAutomationService(config.pipeline),
            delivery_service=AlertDeliveryService(config.alerts, audit_emitter=audit_emitter)
        )
