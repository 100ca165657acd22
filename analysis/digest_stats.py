"""
Digest Statistics Module
Tabulates extracted emails with pandas and summarizes a run (counts, date range, senders).
"""

from typing import List

import pandas as pd

from models.common_models import ExtractedEmail

COLUMNS = ['sender', 'subject', 'received', 'body']


def emails_to_dataframe(emails: List[ExtractedEmail]) -> pd.DataFrame:
    """Build a DataFrame with one row per email; missing bodies stay as None."""
    rows = [
        {
            'sender': email.sender,
            'subject': email.subject,
            'received': email.received_at,
            'body': email.body,
        }
        for email in emails
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


class DigestStats:
    def get_overall_statistics(self, df):
        """
        Get overall statistics for a digest run.
        Returns a dict with total emails, date range, unique senders and missing bodies.
        """
        if df.empty:
            return {'total_emails': 0, 'date_range': [], 'unique_senders': 0, 'missing_bodies': 0}
        received_dates = df['received'].map(lambda value: value.date())
        return {
            'total_emails': len(df),
            'date_range': [str(received_dates.min()), str(received_dates.max())],
            'unique_senders': int(df['sender'].nunique()),
            'missing_bodies': int(df['body'].isna().sum()),
        }

    def get_sender_counts(self, df):
        """Return a dict of sender -> number of emails, busiest first."""
        if df.empty:
            return {}
        counts = df['sender'].value_counts()
        return {sender: int(count) for sender, count in counts.items()}
