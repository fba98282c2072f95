"""Error types raised by the pipeline.

Every failure aborts the run; the CLI reports it and exits non-zero.
"""


class DexError(RuntimeError):
    """Base class for pipeline failures."""


class DexFetchError(DexError):
    """The snapshot could not be retrieved (network error, timeout, HTTP status)."""


class DexDecodeError(DexError):
    """The snapshot was retrieved but is not a usable game data payload."""


class TranscodeError(DexError):
    """A raw move or species record cannot be converted."""
