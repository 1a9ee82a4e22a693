"""Prompt synthesis for a simulated web server response."""

from __future__ import annotations

from mirage.core.models import ChatMessage, CompletionRequest

# 请求行在提示里出现两次：带标签的字段 + 末尾的字面请求行，两处都保留
PROMPT_TEMPLATE = (
    "You are simulating a web server. Generate an HTML response for: "
    "Method: {method}, Path: {path}, Query: {query}. "
    "Return only valid HTML with no explanations. "
    "Start your response with exactly <!DOCTYPE html>. "
    "Make a web application that is fully usable. "
    "Make sure the links point to the correct path. "
    "Do not include any other text or explanations. "
    "Make it colorful. "
    "The request is: {method} {path}?{query}"
)


def build_prompt(method: str, path: str, query: str) -> str:
    """Embed the inbound request line into the instruction text.

    Values are interpolated verbatim; nothing is escaped or validated.
    """
    return PROMPT_TEMPLATE.format(method=method, path=path, query=query)


def build_completion_request(
    method: str,
    path: str,
    query: str,
    *,
    model: str,
    max_tokens: int,
) -> CompletionRequest:
    return CompletionRequest(
        model=model,
        max_tokens=max_tokens,
        messages=[ChatMessage(role="user", content=build_prompt(method, path, query))],
    )
