#!/usr/bin/env python3
from typing import List

from models.common_models import ExtractedEmail

NO_EMAILS_TEXT = "No new emails found for today."
EMAIL_START = "--- Email Start ---"
EMAIL_END = "--- Email End ---"


def format_email_block(email: ExtractedEmail, include_body: bool = True) -> str:
    """Render one email as a delimited text block."""
    lines = [
        EMAIL_START,
        f"From: {email.sender}",
        f"Subject: {email.subject}",
        f"Received: {email.received_at.strftime('%Y-%m-%d %H:%M:%S')}",
    ]
    if include_body and email.body is not None:
        lines.extend(["", "Body:", email.body.strip()])
    lines.append(EMAIL_END)
    return "\n".join(lines) + "\n\n"


def format_digest(emails: List[ExtractedEmail], include_body: bool = True) -> str:
    """
    Concatenate the email blocks in the order given.

    An empty list gives NO_EMAILS_TEXT instead of an empty string.
    """
    if not emails:
        return NO_EMAILS_TEXT
    return "".join(format_email_block(email, include_body) for email in emails)
