#!/usr/bin/env python3
import csv
import os
import re
from typing import List
from models.common_models import ExtractedEmail


def ensure_directory_exists(file_path: str) -> None:
    """Ensure the directory for the given file path exists."""
    directory = os.path.dirname(file_path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)


def clean_text_for_csv(text: str) -> str:
    """Collapse newlines and runs of whitespace to single spaces."""
    if not text:
        return ""
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def save_to_csv(emails: List[ExtractedEmail], output_file: str) -> None:
    """Save extracted emails to a CSV file, one row per email."""
    if not emails:
        print("No emails to save.")
        return

    try:
        ensure_directory_exists(output_file)

        with open(output_file, 'w', newline='', encoding='utf-8') as csvfile:
            fieldnames = ['sender', 'subject', 'received', 'body']
            writer = csv.DictWriter(csvfile, fieldnames=fieldnames)

            writer.writeheader()
            for email in emails:
                row = email.to_dict()
                writer.writerow({field: clean_text_for_csv(row[field]) for field in fieldnames})

        print(f"Successfully saved {len(emails)} emails to {output_file}")
    except Exception as e:
        print(f"Error saving to CSV: {e}")


def save_digest(text: str, output_file: str) -> bool:
    """Write the digest text to a file. Returns False if the file could not be written."""
    try:
        ensure_directory_exists(output_file)
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(text)
    except Exception as e:
        print(f"Error saving digest: {e}")
        return False
    print(f"Digest written to {output_file}")
    return True
