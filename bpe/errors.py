"""Exceptions raised while training a byte pair encoding vocabulary."""


class BPEError(Exception):
    """Base class for all errors raised by the `bpe` package."""


class VocabularyOverflow(BPEError, OverflowError):
    """The requested vocabulary does not fit in the symbol id width."""


class NoPairsAvailable(BPEError, ValueError):
    """The token sequence has fewer than two tokens, so there is nothing to merge."""


class InputReadError(BPEError, OSError):
    """The input file could not be read."""
