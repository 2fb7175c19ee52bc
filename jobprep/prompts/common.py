"""
Shared prompt fragments.
"""

JSON_ONLY_RULE = (
    "IMPORTANT: Output ONLY valid JSON, no preamble text, no explanations "
    "and no markdown code fences. Start directly with {"
)


def numbered(items: list[str] | tuple[str, ...]) -> str:
    """Render items as a numbered list."""
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, 1))


def bulleted(items: list[str] | tuple[str, ...]) -> str:
    """Render items as a bulleted list."""
    return "\n".join(f"- {item}" for item in items)
