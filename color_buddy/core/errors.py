"""Exception hierarchy for colorbuddy.

Every failure the tool reports is a ColorBuddyError. The batch loop catches
that base class per image so one bad file never stops the rest.
"""

MIN_COLORS = 1
MAX_COLORS = 256


class ColorBuddyError(Exception):
    """Base class for all colorbuddy errors."""


class InvalidColorCount(ColorBuddyError, ValueError):
    """Requested colour count outside [MIN_COLORS, MAX_COLORS]."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(f'Invalid color count: {count} (must be {MIN_COLORS}-{MAX_COLORS})')


class InvalidPaletteHeight(ColorBuddyError, ValueError):
    def __init__(self, message: str):
        self.message = message
        super().__init__(f'Invalid palette height: {message}')


class QuantizationFailure(ColorBuddyError):
    def __init__(self, message: str):
        super().__init__(f'Quantization failed: {message}')


class RenderFailure(ColorBuddyError):
    """A palette buffer could not be built or written."""


def validate_color_count(count: int) -> int:
    """Return count unchanged, or raise InvalidColorCount."""
    if isinstance(count, bool) or not isinstance(count, int) or not MIN_COLORS <= count <= MAX_COLORS:
        raise InvalidColorCount(count)
    return count
