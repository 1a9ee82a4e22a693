import json

import pytest

from mirage.core.extract import (
    extract_document,
    extract_from_envelope,
    extract_html,
    fallback_document,
    normalize_extract_mode,
    unescape_fragment,
)


def _anthropic_reply(text: str) -> str:
    return json.dumps(
        {
            "id": "msg_01",
            "type": "message",
            "role": "assistant",
            "model": "claude-3-7-sonnet-20250219",
            "content": [{"type": "text", "text": text}],
            "stop_reason": "end_turn",
            "usage": {"input_tokens": 80, "output_tokens": 20},
        }
    )


def test_extract_html_unescapes_newlines_inside_json_string():
    raw = '{"content":[{"type":"text","text":"<!DOCTYPE html>\\n<html>\\n<body>Hi</body></html>"}]}'
    assert extract_html(raw) == "<!DOCTYPE html>\n<html>\n<body>Hi</body></html>"


def test_extract_html_drops_surrounding_json_noise():
    raw = _anthropic_reply('<!DOCTYPE html>\n<html lang="en"><head><title>T</title></head><body>ok</body></html>')
    html = extract_html(raw)
    assert html.startswith("<!DOCTYPE html>")
    assert html.endswith("</html>")
    assert "stop_reason" not in html
    assert '<html lang="en">' in html


def test_extract_html_takes_first_doctype_and_nearest_closing_tag():
    raw = "xx <!DOCTYPE html><html>one</html> yy <!DOCTYPE html><html>two</html>"
    assert extract_html(raw) == "<!DOCTYPE html><html>one</html>"


def test_extract_html_matches_across_real_line_breaks():
    raw = "prefix\n<!DOCTYPE html>\n<html>\r\n<p>x</p>\n</html>\nsuffix"
    assert extract_html(raw) == "<!DOCTYPE html>\n<html>\r\n<p>x</p>\n</html>"


def test_extract_html_leaves_other_json_escapes_untouched():
    raw = '"<!DOCTYPE html><html><script>var s = \\"a\\\\b\\u00e9\\";\\tx()</script></html>"'
    html = extract_html(raw)
    assert html == '<!DOCTYPE html><html><script>var s = "a\\\\b\\u00e9";\tx()</script></html>'


def test_extract_html_is_case_sensitive_on_doctype():
    raw = "<!doctype html><html></html>"
    assert extract_html(raw) == fallback_document(raw)


def test_extract_html_falls_back_when_doctype_missing():
    raw = '{"type":"error","error":{"type":"authentication_error","message":"invalid x-api-key"}}'
    html = extract_html(raw)
    assert html.startswith("<html>")
    assert f"<pre>{raw}</pre>" in html
    assert "Failed to extract HTML content from API response." in html


def test_extract_html_falls_back_when_closing_tag_missing():
    raw = '"<!DOCTYPE html>\\n<html><body>truncated by max_tokens'
    assert extract_html(raw) == fallback_document(raw)


@pytest.mark.parametrize("raw", ["", "plain text", "<<<>>>", "\\n\\t\\\"", "</html><!DOCTYPE html>"])
def test_extract_html_never_raises_and_keeps_raw(raw):
    html = extract_html(raw)
    assert raw in html


def test_unescape_fragment_is_idempotent():
    once = unescape_fragment('a\\nb\\tc\\"d')
    assert once == 'a\nb\tc"d'
    assert unescape_fragment(once) == once


def test_unescape_fragment_does_not_decode_escaped_backslash():
    assert unescape_fragment('\\\\n') == "\\\n"


def test_extract_from_envelope_reads_text_blocks_without_unescaping():
    page = '<!DOCTYPE html>\n<html><script>console.log("a\\\\nb")</script></html>'
    raw = _anthropic_reply("Here you go:\n" + page + "\nEnjoy")
    assert extract_from_envelope(raw) == page


def test_extract_from_envelope_joins_multiple_text_blocks():
    raw = json.dumps(
        {
            "content": [
                {"type": "text", "text": "<!DOCTYPE html><html>"},
                {"type": "tool_use", "id": "t1", "name": "x", "input": {}},
                {"type": "text", "text": "<body>hi</body></html>"},
            ]
        }
    )
    assert extract_from_envelope(raw) == "<!DOCTYPE html><html><body>hi</body></html>"


@pytest.mark.parametrize(
    "raw",
    [
        "not json <!DOCTYPE html><html></html>",
        "[1, 2, 3]",
        '{"content": "nope"}',
        '{"content": [{"type": "text", "text": "no markup here"}]}',
    ],
)
def test_extract_from_envelope_falls_back_with_raw_reply(raw):
    assert extract_from_envelope(raw) == fallback_document(raw)


def test_extract_document_dispatches_on_mode():
    text = "<!DOCTYPE html><html><p>a\\nb</p></html>"
    raw = _anthropic_reply(text)
    assert extract_document(raw, "raw") == "<!DOCTYPE html><html><p>a\\\nb</p></html>"
    assert extract_document(raw, "envelope") == text


def test_normalize_extract_mode():
    assert normalize_extract_mode(" Envelope ") == "envelope"
    assert normalize_extract_mode("") == "raw"
    with pytest.raises(ValueError):
        normalize_extract_mode("dom")
