from __future__ import annotations
from typing import Optional
from schemas import OutboundMessage, Submission, SubmissionKind
from submissions import ADDRESS_NOT_PROVIDED

CONTACT_SUBJECT = "New Contact Form Submission"
ORDER_SUBJECT = "New Order"
CONFIRMATION_SUBJECT = "Order Confirmation"

def to_html(text: str) -> str:
    return text.replace("\n", "<br>")

def admin_recipient(submission: Submission, admin_email: Optional[str]) -> str:
    # Without a configured admin the submitter gets the notice
    return admin_email or submission.email

def contact_notice(submission: Submission, admin_email: Optional[str] = None) -> OutboundMessage:
    lines = [
        "<h2>New Contact Form Submission</h2>",
        f"<p><strong>Name:</strong> {submission.name}</p>",
        f"<p><strong>Email:</strong> {submission.email}</p>",
    ]
    if submission.phone:
        lines.append(f"<p><strong>Phone:</strong> {submission.phone}</p>")
    lines += [
        "<p><strong>Message:</strong></p>",
        f"<p>{to_html(submission.details)}</p>",
    ]
    return OutboundMessage(
        recipient=admin_recipient(submission, admin_email),
        subject=CONTACT_SUBJECT,
        body="\n".join(lines),
    )

def order_notice(submission: Submission, admin_email: Optional[str] = None) -> OutboundMessage:
    lines = [
        "<h2>New Order</h2>",
        f"<p><strong>Name:</strong> {submission.name}</p>",
        f"<p><strong>Email:</strong> {submission.email}</p>",
        f"<p><strong>Phone Number:</strong> {submission.phone}</p>",
    ]
    if submission.address != ADDRESS_NOT_PROVIDED:
        lines.append(f"<p><strong>Address:</strong> {submission.address}</p>")
    lines += [
        "<h3>Requested Products:</h3>",
        f"<p>{to_html(submission.details)}</p>",
    ]
    if submission.notes:
        lines.append(f"<h3>Additional Notes:</h3><p>{to_html(submission.notes)}</p>")
    lines.append(f"<p>Order Date: {submission.created_at.strftime('%m/%d/%Y, %I:%M:%S %p')}</p>")
    return OutboundMessage(
        recipient=admin_recipient(submission, admin_email),
        subject=ORDER_SUBJECT,
        body="\n".join(lines),
    )

def order_confirmation(submission: Submission) -> OutboundMessage:
    """Customer-facing receipt; only the requested products are echoed back."""
    body = "\n".join([
        "<h2>Thank you for your order!</h2>",
        "<p>Your order has been received successfully and will be processed as soon as possible.</p>",
        "<p>Order Details:</p>",
        "<p><strong>Requested Products:</strong></p>",
        f"<p>{to_html(submission.details)}</p>",
        "<p>We will contact you soon to confirm your order and schedule delivery.</p>",
        "<p>Thank you for your trust in us!</p>",
    ])
    return OutboundMessage(recipient=submission.email, subject=CONFIRMATION_SUBJECT, body=body)

def compose(submission: Submission, admin_email: Optional[str] = None) -> list[OutboundMessage]:
    """Messages to send for a submission, in sending order."""
    if submission.kind == SubmissionKind.CONTACT:
        return [contact_notice(submission, admin_email)]
    return [order_notice(submission, admin_email), order_confirmation(submission)]
