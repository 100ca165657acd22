#!/usr/bin/env python3
import re

from bs4 import BeautifulSoup, NavigableString

# Elements that start a new line when rendered; inline markup (b, i, span, a) does not
BLOCK_TAGS = [
    "p", "div", "li", "tr", "table", "blockquote", "pre",
    "h1", "h2", "h3", "h4", "h5", "h6", "ul", "ol", "hr",
]


def html_to_text(raw_html: str) -> str:
    """Render an HTML message body as plain text."""
    if not raw_html:
        return ""

    soup = BeautifulSoup(raw_html, "html.parser")
    # Outlook HTML bodies carry their own stylesheet and conditional comments
    for tag in soup(["style", "script", "head", "title"]):
        tag.decompose()

    # Line breaks in the HTML source are plain whitespace; only markup breaks lines
    for string in soup.find_all(string=True):
        if type(string) is NavigableString:
            string.replace_with(re.sub(r"\s+", " ", string))

    for br in soup.find_all("br"):
        br.replace_with("\n")
    for tag in soup.find_all(BLOCK_TAGS):
        tag.insert_before("\n")
        tag.insert_after("\n")

    lines = [" ".join(line.split()) for line in soup.get_text().splitlines()]
    text = "\n".join(lines)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
