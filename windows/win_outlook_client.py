#!/usr/bin/env python3
import time
from contextlib import contextmanager
from datetime import date, tzinfo
from typing import List, Optional

from models.common_models import ExtractedEmail
from models.errors import FolderNotFoundError, MailStoreConnectionError
from utils.html_text import html_to_text
from utils.timestamps import get_local_timezone, normalize_received_time

OL_FOLDER_INBOX = 6
OL_MAIL = 43
BODY_FORMATS = {1: "Plain", 2: "HTML", 3: "Rich Text"}

DEFAULT_WINDOW_SIZE = 200
UNKNOWN_SENDER = "unknown"
UNKNOWN_SUBJECT = "Unknown Subject"

_MISSING = object()


@contextmanager
def outlook_session():
    """
    Open a COM session with the local Outlook client and yield its MAPI namespace.

    COM is initialized for the calling thread on entry and released on exit,
    whichever way the block ends.
    """
    try:
        import pythoncom
        import win32com.client
    except ImportError as e:
        raise MailStoreConnectionError(f"pywin32 is not installed: {e}") from e

    pythoncom.CoInitialize()
    outlook = None
    namespace = None
    try:
        try:
            outlook = win32com.client.Dispatch("Outlook.Application")
            namespace = outlook.GetNamespace("MAPI")
        except Exception as e:
            raise MailStoreConnectionError(f"Could not connect to Outlook: {e}") from e
        yield namespace
    finally:
        namespace = None
        outlook = None
        pythoncom.CoUninitialize()


def _read_property(item, name: str, quiet: bool = False):
    """Read a COM property, returning _MISSING instead of raising."""
    try:
        return getattr(item, name)
    except Exception as e:
        if not quiet:
            print(f"   - Warning: could not read {name}: {e}")
        return _MISSING


def _get_subfolder(folder, name: str, folder_path: str):
    try:
        subfolder = folder.Folders.Item(name)
    except Exception:
        subfolder = None
    if subfolder is None:
        raise FolderNotFoundError(folder_path, name)
    return subfolder


def resolve_folder(namespace, folder_path: Optional[str] = None):
    """
    Return the Outlook folder for a slash-delimited path.

    None, "" and "Inbox" select the default inbox. Otherwise the first segment
    is a top-level folder of the default store and each following segment is a
    child of the previous one.
    """
    if not folder_path or folder_path == "Inbox":
        print("Accessing default Inbox folder...")
        return namespace.GetDefaultFolder(OL_FOLDER_INBOX)

    print(f"Accessing custom folder path: {folder_path} ...")
    parts = [part for part in folder_path.split("/") if part]
    if not parts:
        raise FolderNotFoundError(folder_path, folder_path)

    folder = namespace.DefaultStore.GetRootFolder()
    for part in parts:
        folder = _get_subfolder(folder, part, folder_path)
    return folder


def extract_body(item, verbose: bool = False) -> Optional[str]:
    """
    Return the message text, or None when nothing usable could be read.

    The plain-text body wins when it has content; otherwise the HTML body is
    rendered to text.
    """
    plain_body = _read_property(item, "Body")
    if isinstance(plain_body, str) and plain_body.strip():
        if verbose:
            print("   - Success: Found content in Plain Text Body.")
        return plain_body.strip()
    if verbose:
        print("   - Info: Plain Text Body was empty. Trying HTML Body...")

    html_body = _read_property(item, "HTMLBody")
    if isinstance(html_body, str) and html_body.strip():
        try:
            text = html_to_text(html_body).strip()
        except Exception as e:
            print(f"   - Warning: could not convert HTML Body: {e}")
            text = ""
        if text:
            if verbose:
                print(f"   - Success: Parsed HTML Body (length: {len(html_body)} chars).")
            return text
        if verbose:
            print("   - Info: HTML Body produced no text.")
    elif verbose:
        print("   - Info: HTML Body was empty.")

    print("   - Warning: Final body content is empty.")
    return None


def _report_body_format(item) -> None:
    body_format = _read_property(item, "BodyFormat", quiet=True)
    if body_format is _MISSING:
        print("   - Warning: Failed to get BodyFormat. Assuming Plain.")
        body_format = 1
    print(f"   - Detected BodyFormat: {BODY_FORMATS.get(body_format, body_format)}")


def _process_item(item, cutoff_date: date, include_body: bool,
                  local_tz: tzinfo, verbose: bool) -> Optional[ExtractedEmail]:
    # Folders can also hold meeting requests, reports and tasks
    item_class = _read_property(item, "Class", quiet=True)
    if item_class is _MISSING:
        if verbose:
            print("   - Info: Could not read item Class. Skipping item.")
        return None
    if item_class != OL_MAIL:
        return None

    subject = _read_property(item, "Subject")
    if subject is _MISSING or subject is None:
        subject = UNKNOWN_SUBJECT

    raw_received = _read_property(item, "ReceivedTime")
    received_at = None
    if raw_received is not _MISSING:
        received_at = normalize_received_time(raw_received, local_tz)
    if received_at is None:
        print(f"Warning: Could not parse date for email with subject: {subject}")
        return None

    if received_at.date() < cutoff_date:
        return None

    print(f"Processing email: {subject} (Received: {received_at.strftime('%Y-%m-%d %H:%M:%S %Z')})")

    body = None
    if include_body:
        if verbose:
            _report_body_format(item)
        body = extract_body(item, verbose=verbose)
    elif verbose:
        print("   - Skipping body retrieval (bodies disabled).")

    sender = _read_property(item, "SenderName")
    if not isinstance(sender, str) or not sender.strip():
        sender = UNKNOWN_SENDER

    return ExtractedEmail(
        sender=sender,
        subject=subject,
        received_at=received_at,
        body=body,
    )


def scan_folder(folder, cutoff_date: date, window_size: int = DEFAULT_WINDOW_SIZE,
                include_body: bool = True, local_tz: Optional[tzinfo] = None,
                delay: float = 0.0, verbose: bool = False) -> List[ExtractedEmail]:
    """
    Return the emails received on or after ``cutoff_date`` among the newest
    ``window_size`` items of ``folder``, newest first.

    Only the window bounds the scan. Older items inside the window are skipped
    rather than ending the loop, and matching items past the window are never
    seen.
    """
    if local_tz is None:
        local_tz = get_local_timezone()

    messages = folder.Items
    messages.Sort("[ReceivedTime]", True)  # newest first
    total = messages.Count
    print(f"Total items in folder: {total}")

    num_to_check = min(total, window_size)
    print(f"Checking the latest {num_to_check} emails for matches...")

    emails: List[ExtractedEmail] = []
    for index in range(1, num_to_check + 1):
        try:
            item = messages.Item(index)
            email = _process_item(item, cutoff_date, include_body, local_tz, verbose)
        except Exception as e:
            print(f"Warning: Error processing item {index}: {e}")
            email = None

        if email is not None:
            emails.append(email)

        if delay:
            time.sleep(delay)

    print(f"Finished processing emails. Found {len(emails)} emails matching the criteria.")
    return emails
