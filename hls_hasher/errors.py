"""Exception types raised while converting playlist trees."""


class ConversionError(Exception):
    """Base class for failures that abort a conversion."""


class ReadFailure(ConversionError):
    """Raised when a playlist or segment cannot be read from its locator."""


class ParseFailure(ConversionError):
    """Raised when playlist text is not a usable HLS playlist."""


class WriteFailure(ConversionError):
    """Raised when a sink rejects or fails to persist an artifact."""


class ResolveFailure(ConversionError):
    """Raised when a child locator cannot be formed from a base and a reference."""


class EncodingError(Exception):
    """Raised when ffmpeg is missing or fails to produce HLS output."""
