"""
Presentation - base class for scripted slides drawn on a Surface.
"""


class Presentation:
    """
    A presentation drawn on one surface.

    Subclasses draw their scenes in run(), which is called on construction.
    """

    def __init__(self, surface):
        self.surface = surface
        self.run()

    def run(self):
        """Draw the scenes. Override in subclasses."""

    def save(self, file_path, dpi=300):
        self.surface.save(file_path, dpi=dpi)

    def show(self, title="mattex"):
        """Open a window showing the rendered surface (blocks until closed)"""
        # Imported here so headless use never needs Tk
        from .viewer import SurfaceViewer

        SurfaceViewer.open(self.surface, title=title)
