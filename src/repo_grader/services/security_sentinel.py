"""Security sentinel — redacts secrets from repository text before it is
sent to a third-party generative producer.

README files and entry-point sources occasionally carry example keys or
real credentials.  Matches are replaced with ``[REDACTED]``; the scoring
engine never sees redacted text, only prompts do.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping

_REDACTION = "[REDACTED]"

_SECRET_PATTERNS: dict[str, re.Pattern[str]] = {
    "aws_key": re.compile(r"AKIA[0-9A-Z]{16}"),
    "github_token": re.compile(r"gh[pousr]_[A-Za-z0-9_]{36,}"),
    "openai_key": re.compile(r"sk-(?:proj-)?[A-Za-z0-9_\-]{20,}"),
    "google_key": re.compile(r"AIza[0-9A-Za-z_\-]{35}"),
    "groq_key": re.compile(r"gsk_[A-Za-z0-9]{20,}"),
    "assignment": re.compile(
        r"(?:api[_\-]?key|secret[_\-]?key|access[_\-]?token|auth[_\-]?token|password)"
        r"""\s*[:=]\s*['"]?[A-Za-z0-9_\-/+]{12,}['"]?""",
        re.IGNORECASE,
    ),
    "private_key": re.compile(r"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----"),
    "conn_string": re.compile(
        r"(?:postgres(?:ql)?|mysql|mongodb(?:\+srv)?|redis)://[^\s:/]+:[^\s@]+@[^\s]+",
        re.IGNORECASE,
    ),
}


@dataclass(frozen=True, slots=True)
class RedactionReport:
    sections: dict[str, str]
    redactions: int


def redact(text: str) -> tuple[str, int]:
    """Return *text* with secrets replaced and the number of replacements."""
    total = 0
    for pattern in _SECRET_PATTERNS.values():
        text, hits = pattern.subn(_REDACTION, text)
        total += hits
    return text, total


def redact_sections(sections: Mapping[str, str]) -> RedactionReport:
    """Redact every value of a ``{section: text}`` mapping."""
    cleaned: dict[str, str] = {}
    total = 0
    for name, text in sections.items():
        cleaned[name], hits = redact(text)
        total += hits
    return RedactionReport(sections=cleaned, redactions=total)
