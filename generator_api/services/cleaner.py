# turns raw model output into the markup contract of the requested output mode
# html output is a single line; clean() is idempotent on its own html output

import re
from typing import List

from generator_api.schemas.generate import OutputMode

FENCE = "```"
CONTAINER_CLASS = "generated-content"

_FENCE_RE = re.compile(r"```[A-Za-z0-9_+\-]*")
_START_TAG_RE = re.compile(r"<[a-zA-Z][^>]*>")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n[ \t]*\n")


def strip_fences(text: str) -> str:
    # removing one marker can join stray backticks into a new one
    while FENCE in text:
        text = _FENCE_RE.sub("", text)
    return text.strip()


def has_html_tags(text: str) -> bool:
    return _START_TAG_RE.search(text) is not None


def wrap_paragraphs(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    paragraphs: List[str] = []
    for block in _PARAGRAPH_SPLIT_RE.split(text):
        block = block.strip()
        if not block:
            continue
        lines = [line.strip() for line in block.split("\n")]
        paragraphs.append(f"<p>{'<br/>'.join(lines)}</p>")
    return f'<div class="{CONTAINER_CLASS}">{"".join(paragraphs)}</div>'


def clean(raw: str, mode: OutputMode) -> str:
    text = strip_fences(raw or "")
    if mode != OutputMode.HTML:
        return text
    if not text:
        return ""
    if not has_html_tags(text):
        text = wrap_paragraphs(text)
    # joining lines can bring split backticks back together
    return strip_fences(text.replace("\r", "").replace("\n", ""))
