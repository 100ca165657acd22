#!/usr/bin/env python3
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional


@dataclass
class ExtractedEmail:
    """One message that passed the date filter.

    ``body`` is None when no content could be retrieved, which is not the same
    as a message whose body was read but is empty.
    """
    sender: str
    subject: str
    received_at: datetime
    body: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary for CSV export."""
        return {
            "sender": self.sender,
            "subject": self.subject,
            "received": self.received_at.strftime("%Y-%m-%d %H:%M:%S"),
            "body": self.body or ""
        }


@dataclass
class DigestConfig:
    """Options for a single digest run."""
    days_back: int = 1
    include_body: bool = True
    folder_path: Optional[str] = None
    window_size: int = 200
    delay: float = 0.0
    verbose: bool = False
