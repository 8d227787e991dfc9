"""
DrawContext - explicit rendering context of a surface.
Holds the RGB pixel buffer and the current fill/stroke state.
"""

import numpy as np
import cv2  # For polylines
import cv3  # For basic drawing operations

from .styles import to_rgb


WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


class DrawContext:
    """
    Raster context backed by a height x width x 3 uint8 RGB array.

    All coordinates are in pixels. Shapes that leave the buffer are clipped.
    """

    def __init__(self, width, height, background=WHITE):
        self.width = width
        self.height = height
        self.buffer = np.full((height, width, 3), to_rgb(background), dtype=np.uint8)

        self.fill_style = WHITE
        self.stroke_style = BLACK
        self.line_width = 1

    def set_fill(self, color):
        self.fill_style = to_rgb(color)

    def set_stroke(self, color):
        self.stroke_style = to_rgb(color)

    def fill_all(self, color=None):
        """Fill the whole buffer (with the current fill style by default)"""
        self.buffer[:, :] = to_rgb(color) if color is not None else self.fill_style

    def _clip_rect(self, x, y, w, h):
        # Normalise negative sizes so the rectangle always spans x0..x1, y0..y1
        x0, x1 = sorted((int(round(x)), int(round(x + w))))
        y0, y1 = sorted((int(round(y)), int(round(y + h))))
        x0, x1 = max(0, x0), min(self.width, x1)
        y0, y1 = max(0, y0), min(self.height, y1)
        return x0, y0, x1, y1

    def fill_rect(self, x, y, w, h):
        """Fill a rectangle with the fill style"""
        x0, y0, x1, y1 = self._clip_rect(x, y, w, h)
        if x1 > x0 and y1 > y0:
            self.buffer[y0:y1, x0:x1] = self.fill_style

    def stroke_rect(self, x, y, w, h):
        """Outline a rectangle with the stroke style and line width"""
        x0, y0 = int(round(x)), int(round(y))
        x1, y1 = int(round(x + w)), int(round(y + h))
        cv3.rectangle(self.buffer, x0, y0, x1, y1, color=self.stroke_style, t=self.line_width)

    def fill_circle(self, x, y, radius):
        """Fill a circle with the fill style"""
        cv3.circle(self.buffer, int(round(x)), int(round(y)), max(0, int(round(radius))),
                   color=self.fill_style, fill=True)

    def stroke_circle(self, x, y, radius):
        """Outline a circle with the stroke style and line width"""
        cv3.circle(self.buffer, int(round(x)), int(round(y)), max(0, int(round(radius))),
                   color=self.stroke_style, t=self.line_width)

    def line(self, x1, y1, x2, y2):
        """Draw a straight line with the stroke style"""
        cv3.line(self.buffer, int(round(x1)), int(round(y1)),
                 int(round(x2)), int(round(y2)), color=self.stroke_style, t=self.line_width)

    def polyline(self, points, closed=False):
        """
        Draw connected line segments through the given points.

        Args:
            points: Sequence of (x, y) pixel coordinates
            closed: Connect the last point back to the first (default: False)
        """
        if len(points) < 2:
            return
        pts = np.round(np.asarray(points, dtype=np.float64)).astype(np.int32).reshape(-1, 1, 2)
        cv2.polylines(self.buffer, [pts], closed, self.stroke_style, self.line_width)

    def blit(self, image, x, y):
        """
        Copy an RGB image into the buffer with its top-left corner at (x, y).

        Parts falling outside the buffer are dropped.
        """
        h, w = image.shape[:2]
        x, y = int(round(x)), int(round(y))

        dst_x0, dst_y0 = max(0, x), max(0, y)
        dst_x1, dst_y1 = min(self.width, x + w), min(self.height, y + h)
        if dst_x1 <= dst_x0 or dst_y1 <= dst_y0:
            return

        src_x0, src_y0 = dst_x0 - x, dst_y0 - y
        self.buffer[dst_y0:dst_y1, dst_x0:dst_x1] = \
            image[src_y0:src_y0 + (dst_y1 - dst_y0), src_x0:src_x0 + (dst_x1 - dst_x0), :3]
