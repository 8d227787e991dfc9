"""
Mattex - Unit-scaled slide drawing
Renders a demo slide with circles, rectangles, lines and a function graph
Features: Derived unit size, plugin capabilities, PNG export, preview window
"""

import argparse
import logging
import math
import sys

from mattexlib import ColorDetails, Properties, Presentation, Surface, PluginDependencyError
from mattexlib.extras import BUNDLED_PLUGINS


class DemoPresentation(Presentation):
    """One slide exercising every primitive"""

    def run(self):
        s = self.surface
        s.bg(ColorDetails("#1e1e2e", "#1e1e2e"))

        if s.has_capability("axes"):
            s.axes("#585b70", Properties(0.05), grid_step=5, grid_color="#313244")

        width = s.units.to_units(s.w)
        height = s.units.to_units(s.h)

        s.rect(2, 2, width / 4, height / 4, ColorDetails("#89b4fa", "#1e66f5"), Properties(0.2))
        s.circle(width * 0.75, height * 0.3, min(width, height) / 8,
                 ColorDetails("#f9e2af", "#fe640b"), Properties(0.2))
        s.line(2, height - 2, width - 2, height * 0.6, "#a6e3a1", Properties(0.15))
        s.graph(0, 0, width, height / 2, math.sin, "#f38ba8", Properties(0.1), scale=s.u * 4)


def main():
    parser = argparse.ArgumentParser(description='Mattex - Render a unit-scaled demo slide')
    parser.add_argument('--width', type=int, default=1280, help='Frame width in pixels (default: 1280)')
    parser.add_argument('--height', type=int, default=720, help='Frame height in pixels (default: 720)')
    parser.add_argument('--unit', type=float, default=None,
                        help='Custom unit size (default: derived from the frame size)')
    parser.add_argument('-o', '--output', default='slide.png', help='Output image file (default: slide.png)')
    parser.add_argument('--dpi', type=int, default=300, help='DPI stored in the output file (default: 300)')
    parser.add_argument('--show', action='store_true', help='Open a preview window after rendering')
    parser.add_argument('--no-plugins', action='store_true', help='Do not install the bundled plugins')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s',
                        datefmt='%H:%M:%S')

    try:
        surface = Surface(args.width, args.height, unit=args.unit)
    except ValueError as e:
        parser.error(str(e))

    if not args.no_plugins:
        try:
            surface.use_plugins(BUNDLED_PLUGINS)
        except PluginDependencyError as e:
            logging.error(f"Plugins not installed ({len(e.errors)} unmet dependencies)")
            return 1

    presentation = DemoPresentation(surface)
    presentation.save(args.output, dpi=args.dpi)

    if args.show:
        presentation.show(title=f"Mattex - {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
