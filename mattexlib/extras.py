"""
Sample plugins bundled with mattex.
"""

from .plugin_registry import PluginDescriptor


def grid(surface, step, color, props):
    """Draw grid lines every `step` author units across the whole surface"""
    if step <= 0:
        raise ValueError("Grid step must be positive")
    width = surface.units.to_units(surface.w)
    height = surface.units.to_units(surface.h)

    x = step
    while x < width:
        surface.line(x, 0, x, height, color, props)
        x += step
    y = step
    while y < height:
        surface.line(0, y, width, y, color, props)
        y += step


def axes(surface, color, props, grid_step=None, grid_color=None):
    """Draw x and y axes through the centre of the surface, over an optional grid"""
    if grid_step is not None:
        surface.grid(grid_step, grid_color or color, props)
    cx = surface.units.to_units(surface.center_x)
    cy = surface.units.to_units(surface.center_y)
    surface.line(0, cy, surface.units.to_units(surface.w), cy, color, props)
    surface.line(cx, 0, cx, surface.units.to_units(surface.h), color, props)


GRID_PLUGIN = PluginDescriptor(
    "grid",
    description="Background grid lines",
    funcs={"grid": grid},
)

AXES_PLUGIN = PluginDescriptor(
    "axes",
    description="Centred coordinate axes",
    requires=["grid"],
    funcs={"axes": axes},
)

BUNDLED_PLUGINS = [GRID_PLUGIN, AXES_PLUGIN]
