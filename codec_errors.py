"""
Errors raised when decoding malformed RLE or LZ77 streams.

All of them derive from `CodecError`, itself a `ValueError`, so callers may either branch on the exact kind or catch
every decoding failure at once. I/O errors from the underlying streams are not wrapped: they propagate as `OSError`.
"""
from typing import Optional


class CodecError(ValueError):
    """
    Base class for decoding failures.

    Parameters
    ----------
    message : str
        Human-readable description of the failure.
    position : int, optional
        Offset in the encoded buffer where the failure was detected.
    """

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.position = position


class MalformedInputError(CodecError):
    """RLE stream does not consist of whole (count, value) pairs."""


class TruncatedLiteralError(CodecError):
    """LZ77 stream ends right after a literal tag."""


class TruncatedMatchError(CodecError):
    """LZ77 stream ends before the distance and length of a match."""


class InvalidDistanceError(CodecError):
    """LZ77 match points before the start of the decoded output."""


class UnknownTokenError(CodecError):
    """LZ77 tag byte is neither a literal nor a match."""
