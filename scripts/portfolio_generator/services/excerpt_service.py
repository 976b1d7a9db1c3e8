#------------------------------------------------------------
#                     excerpt_service.py
#          Turns README markdown into a short plain
#                    text excerpt for cards.

import re
from ..config import EXCERPT_ELLIPSIS, README_EXCERPT_MAX_LENGTH

MARKDOWN_IMAGE_PATTERN = r"!\[.*?\]\(.*?\)"
FENCED_CODE_PATTERN = r"```[\s\S]*?```"
# Blanks everything from a '#' to the end of its line, headings or not.
HEADING_MARKER_PATTERN = r"#[^\r\n]+"
MARKDOWN_LINK_PATTERN = r"\[(.*?)\]\(.*?\)"
WINDOWS_NEWLINE = "\r\n"


# This function does strip markdown noise from README text.
# Steps run in a fixed order: images, code fences, heading markers,
# links, line endings, surrounding whitespace, then truncation.
def excerpt_markdown(markdown: str, max_len: int = README_EXCERPT_MAX_LENGTH) -> str:
    if not markdown:
        return ""

    text = re.sub(MARKDOWN_IMAGE_PATTERN, "", markdown)
    text = re.sub(FENCED_CODE_PATTERN, "", text)
    text = re.sub(HEADING_MARKER_PATTERN, "", text)
    text = re.sub(MARKDOWN_LINK_PATTERN, r"\1", text)
    text = text.replace(WINDOWS_NEWLINE, "\n")
    text = text.strip()
    return truncate(text, max_len)


# This function does cut text to a maximum length.
# The ellipsis counts toward the limit.
def truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    if max_len <= len(EXCERPT_ELLIPSIS):
        return text[:max_len]
    return text[: max_len - len(EXCERPT_ELLIPSIS)] + EXCERPT_ELLIPSIS
