"""Deterministic token-budget allocator for producer prompts.

Uses ``tiktoken`` for exact token counting.  Prompt sections are fitted in
priority order; whatever a section leaves unused rolls over to the next so
small repositories never waste capacity.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import tiktoken

_ENCODING_NAME = "cl100k_base"

# (section, share of the usable budget).  Sections not listed get whatever
# remains at the end.
_SECTION_SHARES: list[tuple[str, float]] = [
    ("metadata", 0.03),
    ("indicators", 0.02),
    ("dependencies", 0.08),
    ("languages", 0.02),
    ("commits", 0.05),
    ("readme", 0.30),
    ("main_file", 0.25),
    ("tree", 0.20),
]

_RESERVE_SHARE = 0.05
TRUNCATION_NOTE = "\n[... truncated to fit token budget]"

_encoder: tiktoken.Encoding | None = None


def _get_encoder() -> tiktoken.Encoding:
    global _encoder  # noqa: PLW0603
    if _encoder is None:
        _encoder = tiktoken.get_encoding(_ENCODING_NAME)
    return _encoder


def count_tokens(text: str) -> int:
    """Return the exact token count for *text* under cl100k_base."""
    return len(_get_encoder().encode(text))


def truncate_to_budget(text: str, max_tokens: int) -> str:
    """Truncate *text* to fit within *max_tokens*, preferring line boundaries."""
    tokens = _get_encoder().encode(text)
    if len(tokens) <= max_tokens:
        return text
    if max_tokens <= 0:
        return ""

    truncated = _get_encoder().decode(tokens[:max_tokens])
    last_nl = truncated.rfind("\n")
    if last_nl > len(truncated) // 2:
        truncated = truncated[: last_nl + 1]
    return truncated + TRUNCATION_NOTE


@dataclass
class PromptSection:
    name: str
    max_tokens: int
    content: str = ""
    used_tokens: int = 0


@dataclass
class BudgetedPrompt:
    sections: list[PromptSection] = field(default_factory=list)
    total_tokens: int = 0
    budget_limit: int = 0


def allocate(contents: dict[str, str], total_budget: int) -> BudgetedPrompt:
    """Fit *contents* (keyed by section name) into *total_budget* tokens.

    Each section may use its own share plus anything earlier sections left
    unspent; the final section may use everything that is left.
    """
    usable = total_budget - int(total_budget * _RESERVE_SHARE)
    remaining = usable
    carry = 0
    sections: list[PromptSection] = []

    ordered = [name for name, _ in _SECTION_SHARES]
    ordered += [name for name in contents if name not in ordered]
    shares = dict(_SECTION_SHARES)

    for index, name in enumerate(ordered):
        is_last = index == len(ordered) - 1
        share = int(usable * shares.get(name, 0.0))
        limit = remaining if is_last else max(min(share + carry, remaining), 0)

        raw = contents.get(name, "")
        if not raw:
            carry = limit
            sections.append(PromptSection(name=name, max_tokens=limit))
            continue

        fitted = truncate_to_budget(raw, limit)
        used = count_tokens(fitted) if fitted else 0
        remaining -= used
        carry = max(limit - used, 0)
        sections.append(
            PromptSection(name=name, max_tokens=limit, content=fitted, used_tokens=used)
        )

    total = sum(s.used_tokens for s in sections)
    return BudgetedPrompt(sections=sections, total_tokens=total, budget_limit=total_budget)
