"""Exception types raised by the downscale comparison pipeline.

Filesystem failures are not wrapped: discovery, population and listing let
:class:`OSError` propagate unchanged.
"""


class ArgumentError(ValueError):
    """Raised when command-line input is missing or malformed."""


class CodecError(Exception):
    """Raised when a source file cannot be decoded or downscaled.

    Attributes:
        source: Path (or ``"<bytes>"``) of the offending input.
        width: Target width that was requested.
    """

    def __init__(self, source: str, width: int, reason: str) -> None:
        self.source = source
        self.width = width
        super().__init__(f"Cannot downscale {source} to width {width}: {reason}")
