"""
Surface - a fixed-size frame of a presentation.

Owns its unit, its DrawContext and the capability map that plugins extend.
"""

import functools
import logging
import math
import os

import numpy as np
import cv3
from PIL import Image
from pillow_heif import register_heif_opener

from .draw_context import DrawContext, WHITE
from .errors import MattexIOError, PluginDependencyError
from .plugin_registry import install
from .styles import stroke_color
from .unit_model import UnitModel

# Register HEIF opener with Pillow to enable HEIC support
register_heif_opener()

# Horizontal sampling step of graph(), in pixels
GRAPH_STEP = 4


class Surface:
    """
    A frame of the presentation with unit-scaled drawing primitives.

    Every coordinate passed to a primitive is in author units and is multiplied
    by the surface unit (or by the ``u`` argument, when given).

    Functions installed by plugins are looked up by name at call time, so
    ``surface.grid(...)`` calls the ``grid`` capability with the surface bound
    as its first argument.
    """

    def __init__(self, width, height, unit=None):
        """
        Initialize the surface.

        Args:
            width: Width of the frame in pixels
            height: Height of the frame in pixels
            unit: Custom unit size (optional, derived from the size otherwise)
        """
        self.units = UnitModel(width, height, unit)
        self.w = width
        self.h = height
        self.u = self.units.unit
        self.center_x = width // 2
        self.center_y = height // 2

        self.ctx = DrawContext(width, height)
        self.capabilities = {}

        # Images loaded from files, only drawn on request
        self.images = []

        source = "derived" if self.units.is_derived() else "custom"
        logging.debug(f"Surface {width}x{height} px, {source} unit {self.u}")

    def __getattr__(self, name):
        # Only reached for names not found the normal way
        capabilities = self.__dict__.get("capabilities")
        if capabilities is not None and name in capabilities:
            return functools.partial(capabilities[name], self)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute or capability {name!r}")

    def has_capability(self, name):
        return name in self.capabilities

    def use_plugins(self, plugins):
        """
        Install plugins onto this surface.

        Raises:
            PluginDependencyError: If any plugin requires a plugin that was not
                supplied. Nothing is installed in that case.
        """
        errors = install(self, plugins)
        if errors:
            raise PluginDependencyError(errors)

    def get_context(self):
        """Get the rendering context of this surface"""
        return self.ctx

    def _unit(self, u):
        return self.u if u is None else u

    def bg(self, colors):
        """Fill the entire frame with the fill colour. Do this first to set a background."""
        self.ctx.set_fill(colors.fill)
        self.ctx.set_stroke(colors.stroke)
        self.ctx.fill_all()

    def clear(self):
        """Clear the frame to white. Use bg() for a different colour."""
        self.ctx.set_fill(WHITE)
        self.ctx.set_stroke(WHITE)
        self.ctx.fill_all()

    def circle(self, x, y, rad, colors, props, u=None):
        """
        Draw a filled and outlined circle.

        Args:
            x: X position of the centre
            y: Y position of the centre
            rad: Radius
            colors: ColorDetails of the circle
            props: Properties of the circle
            u: Custom unit size for this call (optional)
        """
        u = self._unit(u)
        props.apply(self.ctx, u)
        self.ctx.set_fill(colors.fill)
        self.ctx.set_stroke(colors.stroke)
        self.ctx.fill_circle(x * u, y * u, rad * u)
        self.ctx.stroke_circle(x * u, y * u, rad * u)

    def rect(self, x, y, w, h, colors, props, u=None):
        """
        Draw a filled and outlined rectangle.

        Args:
            x: X position of the top-left corner
            y: Y position of the top-left corner
            w: Width
            h: Height
            colors: ColorDetails of the rectangle
            props: Properties of the rectangle
            u: Custom unit size for this call (optional)
        """
        u = self._unit(u)
        self.ctx.set_fill(colors.fill)
        self.ctx.set_stroke(colors.stroke)
        props.apply(self.ctx, u)
        self.ctx.fill_rect(x * u, y * u, w * u, h * u)
        self.ctx.stroke_rect(x * u, y * u, w * u, h * u)

    def line(self, x1, y1, x2, y2, color, props, u=None):
        """
        Draw a line between two points.

        Args:
            color: Stroke colour, or a ColorDetails whose stroke is used
        """
        u = self._unit(u)
        props.apply(self.ctx, u)
        self.ctx.set_stroke(stroke_color(color))
        self.ctx.line(x1 * u, y1 * u, x2 * u, y2 * u)

    def graph_points(self, xp, yp, w, h, func, scale, u=None):
        """
        Sample func into pixel coordinates for graph().

        The curve spans w author units centred on x0 = u * w / 2, with its
        baseline at y0 = u * h, offset by (xp, yp).

        Returns:
            List of (x, y) pixel coordinates
        """
        u = self._unit(u)
        x0 = u * w / 2
        y0 = u * h
        i_max = round(x0 / GRAPH_STEP)
        i_min = round(-x0 / GRAPH_STEP)

        points = []
        for i in range(i_min, i_max + 1):
            xx = GRAPH_STEP * i
            yy = scale * func(xx / scale)
            if not math.isfinite(yy):
                logging.debug(f"graph: skipping non-finite value at x={xx / scale}")
                continue
            points.append((x0 + xx + xp * u, y0 - yy + yp * u))
        return points

    def graph(self, xp, yp, w, h, func, color, props, scale, u=None):
        """
        Draw the graph of a function.

        Args:
            xp: X offset of the graph
            yp: Y offset of the graph
            w: Width of the graph
            h: Height of the graph baseline
            func: Function of one float to plot
            color: Stroke colour, or a ColorDetails whose stroke is used
            props: Properties of the curve
            scale: Pixels per function unit on both axes
            u: Custom unit size for this call (optional)
        """
        u = self._unit(u)
        props.apply(self.ctx, u)
        self.ctx.set_stroke(stroke_color(color))
        self.ctx.polyline(self.graph_points(xp, yp, w, h, func, scale, u))

    def add_image(self, file_path):
        """
        Load an image file into the surface's image list.

        Args:
            file_path: Path of the image (HEIC/HEIF supported)

        Returns:
            Index of the image, for use with image()

        Raises:
            MattexIOError: If the image cannot be loaded
        """
        if not os.path.exists(file_path):
            raise MattexIOError(f"Image file not found: {file_path}")

        if file_path.lower().endswith(('.heic', '.heif')):
            try:
                with Image.open(file_path) as pil_image:
                    image = np.array(pil_image.convert('RGB'))
            except OSError as e:
                raise MattexIOError(f"Could not load HEIC image {file_path}: {e}") from e
        else:
            # cv3 loads images in RGB by default
            image = cv3.imread(file_path)
            if image is None:
                raise MattexIOError(f"Could not load image {file_path}")

        self.images.append(image)
        logging.info(f"Loaded image {file_path} ({image.shape[1]}x{image.shape[0]})")
        return len(self.images) - 1

    def image(self, index, x, y, w=None, h=None, u=None):
        """
        Draw a loaded image with its top-left corner at (x, y).

        Args:
            index: Index returned by add_image()
            w: Width in author units (optional, keeps pixel size if omitted)
            h: Height in author units (optional, keeps aspect ratio if omitted)
        """
        u = self._unit(u)
        image = self.images[index]
        src_h, src_w = image.shape[:2]

        if w is None and h is None:
            new_w, new_h = src_w, src_h
        elif h is None:
            new_w = self.units.to_pixels(w, u)
            new_h = int(round(src_h * new_w / src_w))
        elif w is None:
            new_h = self.units.to_pixels(h, u)
            new_w = int(round(src_w * new_h / src_h))
        else:
            new_w, new_h = self.units.to_pixels(w, u), self.units.to_pixels(h, u)

        if new_w <= 0 or new_h <= 0:
            return
        if (new_w, new_h) != (src_w, src_h):
            image = cv3.resize(image, new_w, new_h)
        self.ctx.blit(image, x * u, y * u)

    def to_image(self):
        """Get the frame as a PIL image"""
        return Image.fromarray(self.ctx.buffer)

    def save(self, file_path, dpi=300):
        """Save the frame with DPI metadata"""
        try:
            self.to_image().save(file_path, dpi=(dpi, dpi))
        except (OSError, ValueError) as e:
            raise MattexIOError(f"Could not save {file_path}: {e}") from e
        logging.info(f"Frame saved to {file_path} @ {dpi} DPI")

    def __repr__(self):
        return f"Surface({self.w}x{self.h}, unit={self.u}, capabilities={sorted(self.capabilities)})"
