"""Provider-independent prompt construction.

Every generation request goes through ``build_prompt`` before reaching a
provider, so switching providers never changes what the model is asked.

Rendering contract (``PROMPT_VERSION``):

- The framing text comes first, then ``Prompt: <user prompt>``.
- ``User context:`` and ``Metadata (keep in mind while generating):`` sections
  follow, in that order, only when they have at least one renderable entry.
- Each mapping entry renders as ``- <key>: <value>`` in insertion order.
  ``None`` and empty strings/collections are skipped. Nested mappings and lists
  render as compact JSON with sorted keys (insertion order when keys
  are of mixed types); other scalars use ``str()``.
- A non-mapping context value renders as a single ``- <value>`` line.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

# Bump when the rendered layout changes
PROMPT_VERSION = "v1"

SYSTEM_FRAMING = (
    "You are an AI task generation system that creates intelligent, personalized "
    "tasks for professionals based on their goals, mindset, and business needs. "
    "Produce a clear, immediately actionable result."
)

USER_CONTEXT_LABEL = "User context:"
METADATA_LABEL = "Metadata (keep in mind while generating):"


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Mapping, list, tuple, set)):
        return len(value) == 0
    return False


def _dump_json(value: Any, *, sort_keys: bool) -> str:
    return json.dumps(
        value, sort_keys=sort_keys, ensure_ascii=False, separators=(",", ":"), default=str
    )


def render_value(value: Any) -> str:
    """Render a single context value as prompt text."""

    if isinstance(value, (Mapping, list, tuple)):
        try:
            return _dump_json(value, sort_keys=True)
        except TypeError:
            # Keys of mixed types cannot be ordered
            return _dump_json(value, sort_keys=False)
    return str(value)


def render_section(label: str, data: Any) -> str | None:
    """Render a labeled block of ``- key: value`` lines.

    Returns:
        The rendered block, or None when nothing in ``data`` is renderable.
    """

    if _is_blank(data):
        return None

    if isinstance(data, Mapping):
        lines = [
            f"- {key}: {render_value(value)}"
            for key, value in data.items()
            if not _is_blank(value)
        ]
    else:
        lines = [f"- {render_value(data)}"]

    if not lines:
        return None
    return "\n".join([label, *lines])


def build_prompt(
    user_prompt: str,
    user_context: Mapping[str, Any] | None = None,
    metadata: Mapping[str, Any] | None = None,
) -> str:
    """Compose the prompt sent to every provider.

    Args:
        user_prompt: Instruction text written by the user.
        user_context: Optional data about the requesting user (profile, goals).
        metadata: Optional request metadata (category, tone, audience, Q&A).

    Returns:
        Composite prompt string.
    """

    parts = [SYSTEM_FRAMING, f"Prompt: {user_prompt.strip()}"]

    context_block = render_section(USER_CONTEXT_LABEL, user_context)
    if context_block:
        parts.append(context_block)

    metadata_block = render_section(METADATA_LABEL, metadata)
    if metadata_block:
        parts.append(metadata_block)

    return "\n\n".join(parts)
