from typing import List, Sequence
from pydantic import BaseModel

from database.models import JobAlert


class AlertMessage(BaseModel):
    subject: str
    body: str


class AlertJobInfo(BaseModel):
    title: str
    company: str
    location: str = ""
    salary: str = ""
    merit_fit: int = 0

    @classmethod
    def from_alert(cls, alert: JobAlert) -> "AlertJobInfo":
        job = alert.job
        return cls(
            title=job.title or "",
            company=job.company or "",
            location=job.location or "",
            salary=job.salary or "",
            merit_fit=job.merit_fit or 0,
        )


def _cadence_word(cadence: str) -> str:
    return "weekly" if cadence == "weekly" else "daily"


class NotificationMessageBuilder:
    """Plain-text subjects and bodies for alert deliveries."""

    def __init__(self, brand_name: str = "MeritBoard"):
        self.brand_name = brand_name

    def build_instant_email(self, alert: JobAlert) -> AlertMessage:
        info = AlertJobInfo.from_alert(alert)
        body = "\n".join([
            f"Role: {info.title}",
            f"Company: {info.company}",
            f"Location: {info.location}",
            f"Salary: {info.salary}",
            f"Merit fit: {info.merit_fit}",
            f"Reason: {alert.reason}",
        ])
        return AlertMessage(
            subject=f"New {self.brand_name} match: {info.title} at {info.company}",
            body=body,
        )

    @staticmethod
    def build_digest_body(label: str, cadence: str, alerts: Sequence[JobAlert]) -> str:
        lines = [f"{_cadence_word(cadence).upper()} DIGEST", f"Saved search: {label}", ""]
        for alert in alerts:
            info = AlertJobInfo.from_alert(alert)
            lines.extend([
                f"{info.title} | {info.company} | {info.location} | {info.salary} | fit {info.merit_fit}",
                f"Reason: {alert.reason}",
                "",
            ])
        return "\n".join(lines)

    def build_digest_email(self, label: str, cadence: str, alerts: Sequence[JobAlert]) -> AlertMessage:
        prefix = "Weekly" if cadence == "weekly" else "Daily"
        return AlertMessage(
            subject=f"{prefix} {self.brand_name} digest: {label} ({len(alerts)} new matches)",
            body=self.build_digest_body(label, cadence, alerts),
        )

    def build_instant_push(self, alert: JobAlert, label: str) -> AlertMessage:
        info = AlertJobInfo.from_alert(alert)
        body = " | ".join([
            info.title,
            info.company,
            info.location,
            info.salary,
            f"Fit {info.merit_fit}",
            f"Search: {label}",
        ])
        return AlertMessage(subject=f"{self.brand_name} match: {info.title}", body=body)

    def build_push_digest(self, label: str, cadence: str, alerts: Sequence[JobAlert]) -> AlertMessage:
        """
        One push summarising a batch. cadence 'instant' is used for deferred
        pushes on instant searches and reads as a queued digest.
        """
        if cadence == "weekly":
            prefix = "Weekly digest"
        elif cadence == "daily":
            prefix = "Daily digest"
        else:
            prefix = "Queued digest"

        top: List[str] = []
        for alert in alerts[:3]:
            info = AlertJobInfo.from_alert(alert)
            top.append(f"{info.title} ({info.company})")

        body = f"{prefix} for {label}: {len(alerts)} new matches"
        if top:
            body += f" | {', '.join(top)}"

        return AlertMessage(
            subject=f"{self.brand_name} {_cadence_word(cadence)} push digest",
            body=body,
        )

    @staticmethod
    def build_in_app_instant(label: str, count: int) -> AlertMessage:
        return AlertMessage(
            subject=f"In-app match alerts: {label}",
            body=f"Delivered {count} instant in-app alerts.",
        )

    def build_in_app_digest(self, label: str, cadence: str, alerts: Sequence[JobAlert]) -> AlertMessage:
        return AlertMessage(
            subject=f"In-app digest: {label}",
            body=self.build_digest_body(label, cadence, alerts),
        )
