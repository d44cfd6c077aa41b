"""Helpers for redacting secrets from log lines and error strings."""

from __future__ import annotations

import re

_REDACTED = "***REDACTED***"

_KEY_VALUE_RE = re.compile(
    r"(?i)(?P<prefix>[\"']?(?:api[_-]?key|token|secret|password)[\"']?\s*[:=]\s*[\"']?)(?P<value>[^\"',&\s}]+)"
)
_BEARER_RE = re.compile(r"(?i)(?P<prefix>\bbearer\s+)(?P<value>[A-Za-z0-9._~+/=-]+)")
_PROVIDER_KEY_RE = re.compile(r"\bsk-[A-Za-z0-9_-]{8,}\b")
_DSN_CREDENTIAL_RE = re.compile(r"(?i)(?P<prefix>\b(?:redis|rediss|postgres(?:ql)?)://)(?P<creds>[^@/\s]+)@")


def redact_sensitive(text: str) -> str:
    """Mask API keys, bearer tokens and DSN credentials."""
    if not text:
        return text

    redacted = str(text)
    for pattern in (_KEY_VALUE_RE, _BEARER_RE):
        redacted = pattern.sub(lambda m: f"{m.group('prefix')}{_REDACTED}", redacted)
    redacted = _PROVIDER_KEY_RE.sub(_REDACTED, redacted)
    redacted = _DSN_CREDENTIAL_RE.sub(rf"\g<prefix>{_REDACTED}@", redacted)
    return redacted


__all__ = ["redact_sensitive"]
