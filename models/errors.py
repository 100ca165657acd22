#!/usr/bin/env python3


class DigestError(Exception):
    """Base class for errors that end a digest run early."""


class MailStoreConnectionError(DigestError):
    """Outlook (or pywin32) is not available on this machine."""


class FolderNotFoundError(DigestError):
    """A segment of the configured folder path does not exist."""

    def __init__(self, folder_path: str, segment: str):
        super().__init__(f"Folder not found in path '{folder_path}': {segment}")
        self.folder_path = folder_path
        self.segment = segment
