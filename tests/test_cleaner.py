# tests/test_cleaner.py
import pytest

from generator_api.schemas.generate import OutputMode
from generator_api.services.cleaner import CONTAINER_CLASS, clean, has_html_tags, strip_fences

HTML = OutputMode.HTML
TEXT = OutputMode.PLAIN_TEXT

SAMPLES = [
    "",
    "   ",
    "Hello\n\nWorld",
    "```html\n<p>Hello</p>\n```",
    "```\nplain fenced\n```",
    "```python\nprint('x')\n```\n\nafter",
    "<h1>Title</h1>\n<p>one</p>\n\n<p>two</p>\n",
    "line one\nline two\n\nsecond paragraph\r\nwith crlf",
    "a < b and c > d",
    "``\n`",
    "````js\ncode\n`````",
    "<div class=\"x\">\r\n  body\r\n</div>",
]


def test_fenced_html_is_unwrapped():
    # fence markers and surrounding whitespace go, newlines too
    assert clean("```html\n<p>Hello</p>\n```", HTML) == "<p>Hello</p>"


def test_plain_prose_is_wrapped_in_paragraphs():
    out = clean("Hello\n\nWorld", HTML)
    assert out == f'<div class="{CONTAINER_CLASS}"><p>Hello</p><p>World</p></div>'
    assert "\n" not in out


def test_single_newlines_become_breaks():
    out = clean("line one\nline two", HTML)
    assert "<p>line one<br/>line two</p>" in out


def test_existing_markup_is_kept():
    raw = "<h1>Title</h1>\n<p>Body with <strong>emphasis</strong></p>"
    assert clean(raw, HTML) == "<h1>Title</h1><p>Body with <strong>emphasis</strong></p>"


def test_carriage_returns_are_removed():
    assert clean("<p>a</p>\r\n<p>b</p>", HTML) == "<p>a</p><p>b</p>"


@pytest.mark.parametrize("raw", SAMPLES)
def test_html_output_has_no_fence_and_no_newline(raw):
    out = clean(raw, HTML)
    assert "```" not in out
    assert "\n" not in out and "\r" not in out


@pytest.mark.parametrize("raw", SAMPLES)
def test_html_clean_is_idempotent(raw):
    once = clean(raw, HTML)
    assert clean(once, HTML) == once


def test_split_backticks_do_not_form_a_fence():
    # "``" + newline + "`" would read as a fence once lines are joined
    out = clean("<p>``\n`</p>", HTML)
    assert "```" not in out
    assert clean(out, HTML) == out


def test_empty_input_stays_empty():
    assert clean("", HTML) == ""
    assert clean("```html\n```", HTML) == ""
    assert clean(None, HTML) == ""


def test_plain_text_only_strips_fences():
    raw = "```markdown\n# Title\n\nline one\nline two\n```"
    assert clean(raw, TEXT) == "# Title\n\nline one\nline two"


def test_plain_text_keeps_tags_and_newlines():
    assert clean("  <b>x</b>\ny  ", TEXT) == "<b>x</b>\ny"


def test_strip_fences_with_language_tokens():
    assert strip_fences("```c++\nint x;\n```") == "int x;"
    assert strip_fences("```objective-c\nfoo\n```") == "foo"


def test_html_tag_detection_is_a_heuristic():
    assert has_html_tags("<p>x</p>")
    assert has_html_tags("see <b>this</b>")
    assert not has_html_tags("1 < 2")
    assert not has_html_tags("plain text")
