"""
从补全接口的回复里取出 HTML 文档。

raw 模式直接在未解析的 JSON 文本上做一次正则查找，命中后只还原 \\n、\\t、\\" 三种转义；
envelope 模式先解析 JSON，在 content[].text 里查找。两种模式找不到时都返回兜底页面，原始回复原样嵌入。
"""

from __future__ import annotations

import json
import re

from mirage.util.logger import logger

EXTRACT_MODES = ("raw", "envelope")

_DOCUMENT_RE = re.compile(r"<!DOCTYPE html>.*?</html>", re.DOTALL)

# 顺序固定；\\ 与 \uXXXX 等其余 JSON 转义不处理
_ESCAPES = (
    ("\\n", "\n"),
    ("\\t", "\t"),
    ('\\"', '"'),
)

_FALLBACK_PREFIX = (
    "<html><body><h1>Error</h1>"
    "<p>Failed to extract HTML content from API response.</p><pre>"
)
_FALLBACK_SUFFIX = "</pre></body></html>"


def unescape_fragment(text: str) -> str:
    for escaped, literal in _ESCAPES:
        text = text.replace(escaped, literal)
    return text


def fallback_document(raw: str) -> str:
    """Error page carrying the whole upstream reply inside a <pre> block."""
    return f"{_FALLBACK_PREFIX}{raw}{_FALLBACK_SUFFIX}"


def find_document(text: str) -> str | None:
    matched = _DOCUMENT_RE.search(text)
    if matched is None:
        return None
    return matched.group(0)


def extract_html(raw: str) -> str:
    document = find_document(raw)
    if document is None:
        logger.warning("extract miss mode=raw reply_chars=%d", len(raw))
        return fallback_document(raw)
    return unescape_fragment(document)


def _envelope_text(raw: str) -> str | None:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, dict):
        return None
    blocks = parsed.get("content")
    if not isinstance(blocks, list):
        return None
    parts = [
        block["text"]
        for block in blocks
        if isinstance(block, dict) and block.get("type", "text") == "text" and isinstance(block.get("text"), str)
    ]
    if not parts:
        return None
    return "".join(parts)


def extract_from_envelope(raw: str) -> str:
    """Look for the document only inside the assistant's text blocks.

    The text is already JSON-decoded here, so no escape substitution runs.
    """
    text = _envelope_text(raw)
    if text is None:
        logger.warning("extract envelope_undecodable reply_chars=%d", len(raw))
        return fallback_document(raw)
    document = find_document(text)
    if document is None:
        logger.warning("extract miss mode=envelope text_chars=%d", len(text))
        return fallback_document(raw)
    return document


def normalize_extract_mode(raw_mode: str) -> str:
    candidate = str(raw_mode or "raw").strip().lower()
    if candidate not in EXTRACT_MODES:
        raise ValueError(f"invalid_extract_mode: {raw_mode}")
    return candidate


def extract_document(raw: str, mode: str = "raw") -> str:
    if mode == "envelope":
        return extract_from_envelope(raw)
    return extract_html(raw)
