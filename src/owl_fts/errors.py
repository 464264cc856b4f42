"""Exception taxonomy for decoding encoded search indexes.

Every failure raised while turning an encoded string into an index derives
from :class:`DecodeError`, so callers can catch the whole family at once or
pick out the specific stage that failed. All of them are terminal: a failed
decode never yields a partial index.
"""


class DecodeError(ValueError):
    """Base class for all index decoding failures."""


class InvalidInputEncoding(DecodeError):
    """Raised when the outer text or an embedded string is not valid encoded data."""


class InvalidEncoding(InvalidInputEncoding):
    """Raised when a page name or indexed word is not valid UTF-8."""


class InvalidFormat(DecodeError):
    """Raised when the magic header or a structural marker is missing or wrong."""


class UnexpectedEnd(DecodeError):
    """Raised when the input ends before a declared length or terminator is reached."""


class DecompressionFailure(DecodeError):
    """Raised when the compressed payload cannot be inflated."""
