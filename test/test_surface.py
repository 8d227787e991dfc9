"""
Tests for the drawing surface, its primitives and capability lookup
"""

import numpy as np
import pytest
from PIL import Image

from mattexlib import ColorDetails, Properties, Presentation, Surface
from mattexlib.errors import MattexIOError, PluginDependencyError
from mattexlib.extras import AXES_PLUGIN, BUNDLED_PLUGINS, GRID_PLUGIN
from mattexlib.plugin_registry import PluginDescriptor
from mattexlib.styles import to_rgb

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)


def pixel(surface, x, y):
    return tuple(int(c) for c in surface.ctx.buffer[y, x])


class TestSurfaceSetup:

    def test_unit_derived_on_construction(self):
        surface = Surface(1920, 1080)
        assert surface.u == 19
        assert surface.center_x == 960
        assert surface.center_y == 540

    def test_unit_override(self):
        assert Surface(1920, 1080, unit=4).u == 4

    def test_context_owned_by_surface(self):
        a = Surface(10, 10, unit=1)
        b = Surface(10, 10, unit=1)
        assert a.get_context() is a.ctx
        assert a.get_context() is not b.get_context()
        assert a.ctx.buffer.shape == (10, 10, 3)

    def test_starts_white(self):
        surface = Surface(8, 6, unit=1)
        assert np.all(surface.ctx.buffer == 255)


class TestPrimitives:

    def test_bg_fills_everything(self):
        surface = Surface(20, 10, unit=1)
        surface.bg(ColorDetails("#000000", "#ff0000"))
        assert np.all(surface.ctx.buffer == np.array(RED, dtype=np.uint8))

    def test_clear(self):
        surface = Surface(20, 10, unit=1)
        surface.bg(ColorDetails("#000000", "#ff0000"))
        surface.clear()
        assert np.all(surface.ctx.buffer == 255)

    def test_rect_fills_inside(self):
        surface = Surface(50, 40, unit=1)
        surface.rect(10, 10, 20, 10, ColorDetails("#000000", "#ff0000"), Properties(1))
        assert pixel(surface, 20, 15) == RED
        assert pixel(surface, 40, 35) == WHITE

    def test_rect_scaled_by_unit(self):
        surface = Surface(50, 40, unit=5)
        surface.rect(2, 2, 4, 2, ColorDetails("#ff0000", "#ff0000"), Properties(0.2))
        assert pixel(surface, 20, 15) == RED
        assert pixel(surface, 5, 5) == WHITE

    def test_rect_per_call_unit(self):
        surface = Surface(50, 40, unit=5)
        surface.rect(2, 2, 4, 2, ColorDetails("#ff0000", "#ff0000"), Properties(1), u=1)
        assert pixel(surface, 4, 3) == RED
        assert pixel(surface, 20, 15) == WHITE

    def test_circle_fills_centre(self):
        surface = Surface(50, 40, unit=1)
        surface.circle(25, 20, 8, ColorDetails("#000000", "#00ff00"), Properties(1))
        assert pixel(surface, 25, 20) == GREEN
        assert pixel(surface, 2, 2) == WHITE

    def test_line(self):
        surface = Surface(50, 40, unit=1)
        surface.line(0, 5, 49, 5, "#0000ff", Properties(1))
        assert pixel(surface, 25, 5) == BLUE
        assert pixel(surface, 25, 20) == WHITE

    def test_line_uses_stroke_of_color_details(self):
        surface = Surface(50, 40, unit=1)
        surface.line(0, 5, 49, 5, ColorDetails("#0000ff", "#ff0000"), Properties(1))
        assert pixel(surface, 25, 5) == BLUE

    def test_graph_points(self):
        surface = Surface(100, 50, unit=1)
        points = surface.graph_points(0, 0, 40, 20, lambda x: 0, scale=1)
        assert len(points) == 11
        assert points[0] == (0, 20)
        assert points[-1] == (40, 20)

    def test_graph_points_offset_and_scale(self):
        surface = Surface(100, 50, unit=2)
        points = surface.graph_points(1, 1, 8, 10, lambda x: x, scale=4)
        # x0 = 8, y0 = 20, offsets of 2 px
        assert points[0] == (2, 30)
        assert points[-1] == (18, 14)

    def test_graph_skips_non_finite(self):
        surface = Surface(100, 50, unit=1)
        points = surface.graph_points(0, 0, 40, 20, lambda x: 1 / x if x else float("inf"), scale=1)
        assert len(points) == 10

    def test_graph_draws(self):
        surface = Surface(100, 50, unit=1)
        surface.graph(0, 0, 80, 25, lambda x: 0, "#ff0000", Properties(1), scale=1)
        assert pixel(surface, 40, 25) == RED


class TestCapabilities:

    def test_plugin_method_bound_to_surface(self):
        surface = Surface(10, 10, unit=1)
        plugin = PluginDescriptor("echo", funcs={"echo": lambda s, value: (s, value)})
        surface.use_plugins([plugin])
        assert surface.has_capability("echo")
        assert surface.echo(3) == (surface, 3)

    def test_unknown_name_raises_attribute_error(self):
        surface = Surface(10, 10, unit=1)
        with pytest.raises(AttributeError):
            surface.star()

    def test_builtin_methods_win_over_capabilities(self):
        surface = Surface(10, 10, unit=1)
        surface.use_plugins([PluginDescriptor("p", funcs={"clear": lambda s: "plugin"})])
        assert surface.clear() is None

    def test_use_plugins_raises_with_all_errors(self):
        surface = Surface(10, 10, unit=1)
        with pytest.raises(PluginDependencyError) as excinfo:
            surface.use_plugins([
                PluginDescriptor("a", requires=["x"], funcs={"fa": lambda s: 1}),
                PluginDescriptor("b", requires=["y"]),
            ])
        assert [(e.consumer, e.missing) for e in excinfo.value.errors] == [("a", "x"), ("b", "y")]
        assert "Plugin a is asking for x" in str(excinfo.value)
        assert surface.capabilities == {}

    def test_bundled_plugins(self):
        surface = Surface(200, 100, unit=10)
        surface.use_plugins(BUNDLED_PLUGINS)
        surface.axes("#ff0000", Properties(0.1))
        assert pixel(surface, 10, 50) == RED
        assert pixel(surface, 100, 10) == RED

    def test_axes_with_grid(self):
        surface = Surface(200, 100, unit=10)
        surface.use_plugins([GRID_PLUGIN, AXES_PLUGIN])
        surface.axes("#ff0000", Properties(0.1), grid_step=5, grid_color="#0000ff")
        assert pixel(surface, 50, 10) == BLUE
        assert pixel(surface, 10, 50) == RED

    def test_axes_follow_custom_unit(self):
        surface = Surface(200, 100, unit=4)
        surface.use_plugins(BUNDLED_PLUGINS)
        surface.axes("#ff0000", Properties(0.25))
        assert pixel(surface, 10, 50) == RED
        assert pixel(surface, 100, 90) == RED
        assert pixel(surface, 10, 10) == WHITE

    def test_axes_requires_grid(self):
        surface = Surface(200, 100, unit=10)
        with pytest.raises(PluginDependencyError):
            surface.use_plugins([AXES_PLUGIN])
        assert not surface.has_capability("axes")


class TestImages:

    def test_save(self, tmp_path):
        surface = Surface(30, 20, unit=1)
        surface.bg(ColorDetails("#000000", "#00ff00"))
        out = tmp_path / "frame.png"
        surface.save(str(out), dpi=150)
        with Image.open(out) as img:
            assert img.size == (30, 20)
            assert img.convert("RGB").getpixel((5, 5)) == GREEN

    def test_add_and_draw_image(self, tmp_path):
        path = tmp_path / "red.png"
        Image.new("RGB", (4, 4), RED).save(path)

        surface = Surface(20, 20, unit=2)
        index = surface.add_image(str(path))
        assert index == 0
        surface.image(index, 1, 1)
        assert pixel(surface, 3, 3) == RED
        assert pixel(surface, 10, 10) == WHITE

    def test_draw_image_resized(self, tmp_path):
        path = tmp_path / "blue.png"
        Image.new("RGB", (4, 2), BLUE).save(path)

        surface = Surface(40, 40, unit=2)
        surface.image(surface.add_image(str(path)), 0, 0, w=8)
        # 16 px wide keeps the 2:1 aspect ratio, so 8 px high
        assert pixel(surface, 15, 7) == BLUE
        assert pixel(surface, 15, 9) == WHITE

    def test_missing_image(self, tmp_path):
        surface = Surface(10, 10, unit=1)
        with pytest.raises(MattexIOError):
            surface.add_image(str(tmp_path / "nope.png"))


class TestStyles:

    def test_to_rgb(self):
        assert to_rgb("#ff8800") == (255, 136, 0)
        assert to_rgb("red") == RED
        assert to_rgb((1, 2, 3, 4)) == (1, 2, 3)

    def test_line_width(self):
        assert Properties(0.2).line_width(10) == 2
        assert Properties(0.01).line_width(10) == 1
        assert Properties().stroke_width == 1


class TestPresentation:

    def test_run_called_on_construction(self):
        class Slide(Presentation):
            def run(self):
                self.surface.bg(ColorDetails("#000000", "#0000ff"))

        surface = Surface(10, 10, unit=1)
        slide = Slide(surface)
        assert slide.surface is surface
        assert pixel(surface, 5, 5) == BLUE

    def test_save_delegates(self, tmp_path):
        out = tmp_path / "slide.png"
        Presentation(Surface(12, 8, unit=1)).save(str(out))
        assert out.exists()
