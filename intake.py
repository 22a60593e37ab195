"""Accept submissions and send their notifications.

A submission moves Received -> Validating -> Rejected or Accepted. Accepted
submissions go on to Notifying -> Completed. Once accepted, nothing that
happens while notifying changes the outcome reported to the caller.
"""
from __future__ import annotations
import logging
from typing import Any, Mapping, Optional, Sequence
from pydantic import BaseModel, Field
from database import Store
from notifications import compose
from notifier import Notifier
from schemas import OrderRecord, OutboundMessage, Submission, SubmissionKind
from submissions import SubmissionValidationError, normalize

logger = logging.getLogger(__name__)

NOTIFICATION_WARNING = "Email notification failed"

class IntakeError(Exception):
    """A submission failed for a reason other than missing fields."""

class NotificationReport(BaseModel):
    sent: list[OutboundMessage] = Field(default_factory=list)
    failed: list[OutboundMessage] = Field(default_factory=list)

    @property
    def warning(self) -> Optional[str]:
        # Admin and customer failures are reported the same way
        return NOTIFICATION_WARNING if self.failed else None

class IntakeOutcome(BaseModel):
    submission: Submission
    accepted: bool = True
    order: Optional[OrderRecord] = None
    warning: Optional[str] = None

async def best_effort_notify(notifier: Notifier, messages: Sequence[OutboundMessage]) -> NotificationReport:
    """Send each message once, in order, tolerating failures.

    A failed message is logged and recorded; later messages are still sent.
    """
    report = NotificationReport()
    for message in messages:
        try:
            ok = await notifier.send(message)
        except Exception:
            logger.exception("Notifier raised while sending %r to %s", message.subject, message.recipient)
            ok = False
        if ok:
            report.sent.append(message)
        else:
            logger.warning("Notification %r to %s was not delivered", message.subject, message.recipient)
            report.failed.append(message)
    return report

class IntakeHandler:
    def __init__(self, store: Store, notifier: Notifier, admin_email: Optional[str] = None):
        self.store = store
        self.notifier = notifier
        self.admin_email = admin_email

    async def accept(self, raw: Mapping[str, Any], kind: SubmissionKind) -> tuple[Submission, Optional[OrderRecord]]:
        try:
            submission = normalize(raw, kind)
            order = None
            if kind == SubmissionKind.ORDER:
                order = await self.store.create_order(submission)
        except SubmissionValidationError as exc:
            logger.info("Rejected %s submission, missing: %s", kind.value, ", ".join(exc.missing))
            raise
        except Exception as exc:
            logger.exception("Error processing %s submission", kind.value)
            raise IntakeError(f"could not accept {kind.value} submission") from exc
        return submission, order

    async def handle(self, raw: Mapping[str, Any], kind: SubmissionKind) -> IntakeOutcome:
        """Validate, store and notify.

        Raises SubmissionValidationError for missing fields and IntakeError
        for any other failure before acceptance.
        """
        submission, order = await self.accept(raw, kind)
        if order is not None:
            logger.info("Accepted order %s from %s", order.id, submission.email)
        else:
            logger.info("Accepted %s submission from %s", kind.value, submission.email)

        report = await best_effort_notify(self.notifier, compose(submission, self.admin_email))
        return IntakeOutcome(submission=submission, order=order, warning=report.warning)
