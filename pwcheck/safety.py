"""Output guard for evaluation results.

Any string in an evaluation result that is derived from the submitted
password or from a dictionary entry is an ``OutputSafeText``. Only a
``SecretGuard`` can create one, and it refuses values that contain the secret.
The single exception is the sanctioned exact-match echo, where the matched
dictionary entry is by definition the normalized password.
"""

import json
import logging

from pwcheck.errors import SecurityInvariantViolation

logger = logging.getLogger(__name__)

MASK_CHAR = "*"

_GUARD_TOKEN = object()


class OutputSafeText(str):
    """A string cleared for output by a ``SecretGuard``."""

    # origin is "text" for whole values, "template" for fixed templates whose
    # interpolated values were checked, "echo" for the exact-match echo
    def __new__(cls, value, origin="text", _token=None):
        if _token is not _GUARD_TOKEN:
            raise TypeError("OutputSafeText can only be created through SecretGuard")
        text = super().__new__(cls, value)
        text.origin = origin
        return text


class SecretGuard:
    """Holds the raw password for the duration of one evaluation."""

    def __init__(self, secret):
        self._secret = secret
        self._folded = secret.casefold()

    def __repr__(self):
        return "<SecretGuard>"

    def _contains_secret(self, value):
        return bool(self._folded) and self._folded in value.casefold()

    def _violation(self, where):
        logger.error("Password echo blocked in %s", where)
        return SecurityInvariantViolation()

    def reveal(self, value, sanctioned=False):
        """Clear ``value`` for output; fails if it contains the secret.

        ``sanctioned`` is reserved for the exact-match echo.
        """
        if not sanctioned and self._contains_secret(value):
            raise self._violation("revealed text")
        return OutputSafeText(value, origin="echo" if sanctioned else "text", _token=_GUARD_TOKEN)

    def mask(self, value):
        """Clear ``value`` after blanking every occurrence of the secret."""
        folded = value.casefold()
        # casefold can change length for some scripts; fall back to a full mask
        if len(folded) != len(value):
            if self._contains_secret(value):
                return self.reveal(MASK_CHAR * len(value))
            return self.reveal(value)
        chars = list(value)
        width = len(self._folded)
        start = folded.find(self._folded) if width else -1
        while start != -1:
            chars[start:start + width] = MASK_CHAR * width
            start = folded.find(self._folded, start + width)
        return self.reveal("".join(chars))

    def format(self, template, **values):
        """Interpolate ``values`` into a fixed template, checking each value."""
        for name, value in values.items():
            if self._contains_secret(str(value)):
                raise self._violation(f"detail field {name!r}")
        return OutputSafeText(template.format(**values), origin="template", _token=_GUARD_TOKEN)

    def verify(self, payload):
        """Walk a serializable payload and re-check every cleared string."""
        if isinstance(payload, OutputSafeText):
            if payload.origin == "text" and self._contains_secret(payload):
                raise self._violation("serialized result")
        elif isinstance(payload, dict):
            for value in payload.values():
                self.verify(value)
        elif isinstance(payload, (list, tuple)):
            for value in payload:
                self.verify(value)
        return payload

    def verify_serialized(self, payload):
        """Fail if the raw secret shows up anywhere in the JSON form of ``payload``.

        Covers keys, fixed labels and numbers, which ``verify`` does not see.
        """
        serialized = json.dumps(payload, ensure_ascii=False)
        escaped = json.dumps(self._secret, ensure_ascii=False)[1:-1]
        if self._secret in serialized or escaped in serialized:
            raise self._violation("serialized result")
        return payload
