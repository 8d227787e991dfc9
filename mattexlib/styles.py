"""
Colour and stroke properties used by the drawing primitives.
"""

from PIL import ImageColor


def to_rgb(color):
    """
    Convert a colour to an RGB tuple.

    Args:
        color: Hex string ("#ff8800"), colour name ("red") or RGB(A) tuple

    Returns:
        Tuple of three ints in 0-255
    """
    if isinstance(color, str):
        return ImageColor.getrgb(color)[:3]
    r, g, b = tuple(color)[:3]
    return (int(r), int(g), int(b))


class ColorDetails:
    """Two colours of a shape: the outline (stroke) and the inside (fill)."""

    def __init__(self, stroke, fill):
        self.stroke = stroke
        self.fill = fill

    @property
    def stroke_rgb(self):
        return to_rgb(self.stroke)

    @property
    def fill_rgb(self):
        return to_rgb(self.fill)

    def __repr__(self):
        return f"ColorDetails(stroke={self.stroke!r}, fill={self.fill!r})"


class Properties:
    """Stroke properties of a shape, in author units."""

    def __init__(self, stroke_width=1):
        """
        Args:
            stroke_width: Width of the outline in author units (default: 1)
        """
        self.stroke_width = stroke_width

    def line_width(self, unit):
        """Outline width in pixels for the given unit, never below one pixel"""
        return max(1, int(round(self.stroke_width * unit)))

    def apply(self, context, unit):
        """Set the line width of a DrawContext from these properties"""
        context.line_width = self.line_width(unit)


def stroke_color(color):
    """Stroke colour of a ColorDetails, or the colour itself for plain colours"""
    if isinstance(color, ColorDetails):
        return color.stroke_rgb
    return to_rgb(color)
