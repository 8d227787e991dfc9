"""
Unit model - derives the drawing unit from canvas pixel dimensions.
Converts author coordinates into pixel coordinates.
"""

import logging
import math
import numbers


# Returned when one of the dimensions is zero
MIN_UNIT = 1

# Exponent offset used by the unit heuristic
DIGIT_OFFSET = 1.95


def _check_dimension(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")


def _decimal_digits(value):
    # str() is capped for very large ints, so estimate with log10 and correct
    digits = int(math.log10(value)) + 1
    if 10 ** (digits - 1) > value:
        digits -= 1
    elif 10 ** digits <= value:
        digits += 1
    return digits


def derive_unit(width, height, override=None):
    """
    Derive the unit size for a canvas.

    The unit grows sub-linearly with the pixel count so that hand-written
    coordinates stay in the 10-100 range on small and large canvases alike.

    Args:
        width: Canvas width in pixels
        height: Canvas height in pixels
        override: Explicit unit to use instead of the heuristic (optional)

    Returns:
        Positive unit size

    Raises:
        ValueError: If a dimension is negative or not an integer, or the
            override is not a positive finite number
    """
    _check_dimension("width", width)
    _check_dimension("height", height)

    if override is not None:
        if isinstance(override, bool) or not isinstance(override, numbers.Real):
            raise ValueError(f"Unit override must be a number, got {override!r}")
        if not math.isfinite(override) or override <= 0:
            raise ValueError(f"Unit override must be positive, got {override}")
        return override

    area = int(width) * int(height)
    if area == 0:
        logging.warning(f"Canvas {width}x{height} has no area, using unit {MIN_UNIT}")
        return MIN_UNIT

    # Divide as integers first; area may exceed the float range
    digits = _decimal_digits(area)
    leading = area * 100 / 10 ** digits
    return math.ceil(leading * 10 ** (DIGIT_OFFSET - 2))


class UnitModel:
    """
    Holds the unit of one canvas and converts between author units and pixels.

    The unit is fixed once the model is created.
    """

    def __init__(self, width, height, override=None):
        """
        Initialize the unit model.

        Args:
            width: Canvas width in pixels
            height: Canvas height in pixels
            override: Explicit unit size (optional, default: derived)
        """
        self.width = width
        self.height = height
        self.unit = derive_unit(width, height, override)
        self._derived = override is None

    def is_derived(self):
        """Check if the unit came from the heuristic rather than an override"""
        return self._derived

    def to_pixels(self, value, unit=None):
        """
        Convert a value in author units to pixels.

        Args:
            value: Value in author units
            unit: Override the model unit for this conversion (optional)

        Returns:
            Integer pixel value
        """
        if unit is None:
            unit = self.unit
        return int(round(value * unit))

    def to_units(self, pixels, unit=None):
        """
        Convert a pixel value back to author units.

        Args:
            pixels: Pixel value
            unit: Override the model unit for this conversion (optional)

        Returns:
            Float value in author units
        """
        if unit is None:
            unit = self.unit
        return pixels / unit

    def __repr__(self):
        return f"UnitModel({self.width}x{self.height}, unit={self.unit})"
