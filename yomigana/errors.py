"""
Exception types raised by Yomigana.

An unknown word is not an error: lookups simply return no candidates and
the fragment renders as plain text.
"""


class YomiganaError(Exception):
    """Base class for all Yomigana errors."""


class DictionaryParseError(YomiganaError, ValueError):
    """Raised when a raw dictionary line cannot be parsed.

    The offending line is kept verbatim in ``line``.
    """

    def __init__(self, line: str, reason: str = ""):
        self.line = line
        self.reason = reason
        message = f"Failed to parse line: {line!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class StoreUnavailableError(YomiganaError):
    """Raised when the dictionary store is missing, corrupt or incomplete."""


class TokenDetailMismatch(YomiganaError):
    """Raised when a tokenizer returns morphological detail of an unexpected shape.

    The tokenizer adapter recovers from it by degrading the token to an
    opaque one, so callers never see this exception.
    """


class TokenizerUnavailableError(YomiganaError, RuntimeError):
    """Raised when the optional morphological analyser cannot be initialized."""
