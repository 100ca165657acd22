#!/usr/bin/env python3
import argparse
import os
import sys
from datetime import date, datetime, timedelta, tzinfo
from typing import List, Optional, Tuple

# Add the parent directory to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from analysis.digest_stats import DigestStats, emails_to_dataframe
from models.common_models import DigestConfig, ExtractedEmail
from models.errors import DigestError
from utils.csv_storage import save_digest, save_to_csv
from utils.digest_formatter import format_digest
from utils.timestamps import get_local_timezone
from windows.win_outlook_client import outlook_session, resolve_folder, scan_folder


def compute_cutoff_date(days_back: int, today: date) -> date:
    """First calendar day included in the digest; days_back=1 means today only."""
    if days_back < 1:
        raise ValueError(f"days_back must be at least 1, got {days_back}")
    return today - timedelta(days=days_back - 1)


def collect_emails(config: DigestConfig, today: Optional[date] = None,
                   local_tz: Optional[tzinfo] = None,
                   session_factory=outlook_session) -> List[ExtractedEmail]:
    """
    Run one scan against Outlook and return the matching emails.

    Connection and folder errors, and anything else that escapes the scan, are
    reported and give an empty list.
    """
    if local_tz is None:
        local_tz = get_local_timezone()
    if today is None:
        today = datetime.now(local_tz).date()

    cutoff = compute_cutoff_date(config.days_back, today)
    print("Starting Outlook email scraping process...")
    print(f"Targeting emails received on or after: {cutoff.strftime('%Y-%m-%d')}")

    emails: List[ExtractedEmail] = []
    try:
        with session_factory() as namespace:
            folder = resolve_folder(namespace, config.folder_path)
            print(f"Successfully accessed folder: {folder.Name}")
            emails = scan_folder(
                folder,
                cutoff,
                window_size=config.window_size,
                include_body=config.include_body,
                local_tz=local_tz,
                delay=config.delay,
                verbose=config.verbose,
            )
    except DigestError as e:
        print(f"ERROR: {e}")
    except Exception as fatal:
        print(f"An error occurred: {fatal}")
    finally:
        print("Outlook scraping process finished.")
    return emails


def build_digest(config: DigestConfig, today: Optional[date] = None,
                 local_tz: Optional[tzinfo] = None,
                 session_factory=outlook_session) -> Tuple[List[ExtractedEmail], str]:
    """Collect emails and format them; always returns well-formed digest text."""
    emails = collect_emails(config, today=today, local_tz=local_tz, session_factory=session_factory)
    return emails, format_digest(emails, include_body=config.include_body)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def _non_negative_float(value: str) -> float:
    number = float(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return number


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Build a plain-text digest of recent Outlook emails for an LLM prompt')
    parser.add_argument('--days-back', type=_positive_int, default=1,
                        help='How many days to include; 1 means only emails received today (default: 1)')
    parser.add_argument('--no-body', action='store_true', help='Leave email bodies out (faster, less data)')
    parser.add_argument('--folder', type=str, default=None,
                        help='Folder path such as "Inbox/MyProjectEmails" (default: the primary Inbox)')
    parser.add_argument('--window', type=_positive_int, default=200,
                        help='Number of most recent items to inspect (default: 200)')
    parser.add_argument('--delay', type=_non_negative_float, default=0.0,
                        help='Seconds to wait between item reads (default: 0)')
    parser.add_argument('--output', type=str, help='Write the digest to this file instead of the console')
    parser.add_argument('--csv', type=str, help='Also save the extracted emails to this CSV file')
    parser.add_argument('--summary', action='store_true', help='Print a summary table of the extracted emails')
    parser.add_argument('--verbose', action='store_true', help='Show detailed processing information')
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> DigestConfig:
    return DigestConfig(
        days_back=args.days_back,
        include_body=not args.no_body,
        folder_path=args.folder,
        window_size=args.window,
        delay=args.delay,
        verbose=args.verbose,
    )


def main(argv=None):
    args = parse_args(argv)
    config = config_from_args(args)

    emails, digest_text = build_digest(config)

    if not emails:
        print("\nNo emails found for the specified period to process.")

    # Fall back to the console when the digest file cannot be written
    if not args.output or not save_digest(digest_text, args.output):
        print("\n--- Text for LLM ---")
        print(digest_text)

    if args.csv:
        save_to_csv(emails, args.csv)

    if args.summary and emails:
        df = emails_to_dataframe(emails)
        stats = DigestStats().get_overall_statistics(df)
        print("\n--- Summary ---")
        print(f"Emails: {stats['total_emails']}")
        print(f"Date range: {stats['date_range'][0]} to {stats['date_range'][1]}")
        print(f"Unique senders: {stats['unique_senders']}")
        print(f"Missing bodies: {stats['missing_bodies']}")
        for sender, count in DigestStats().get_sender_counts(df).items():
            print(f"  {sender}: {count}")
        print(df[['sender', 'subject', 'received']].head())


if __name__ == "__main__":
    main()
