"""
SurfaceViewer - Tk window that displays a rendered surface with zoom and pan.
"""

import tkinter as tk
import numpy as np
import cv3
from PIL import Image, ImageTk


# Grey shown around the frame
BACKDROP = 64


class SurfaceViewer:
    """Shows a surface buffer on a Tk canvas, with zoom and drag-to-pan"""

    ZOOM_STEP = 1.2
    MIN_ZOOM = 0.1
    MAX_ZOOM = 10.0

    def __init__(self, canvas, surface, canvas_width, canvas_height):
        self.canvas = canvas
        self.surface = surface
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height

        self.zoom_level = 1.0
        self.pan_offset = [0.0, 0.0]
        self.fit_scale = 1.0
        self.needs_center = True

        self.drag_start = None

        # Tk drops images that are not referenced from Python
        self.photo = None

    @classmethod
    def open(cls, surface, title="mattex", max_size=(1200, 800)):
        """Create a window for the surface and run the Tk main loop"""
        root = tk.Tk()
        root.title(title)

        width = min(surface.w, max_size[0])
        height = min(surface.h, max_size[1])
        canvas = tk.Canvas(root, width=width, height=height, highlightthickness=0)
        canvas.pack(fill=tk.BOTH, expand=True)

        viewer = cls(canvas, surface, width, height)
        viewer.bind(root)
        viewer.render()
        root.mainloop()
        return viewer

    def bind(self, root):
        self.canvas.bind("<ButtonPress-1>", lambda e: self.start_pan(e.x, e.y))
        self.canvas.bind("<B1-Motion>", self._on_drag)
        self.canvas.bind("<ButtonRelease-1>", lambda e: self.end_pan())
        self.canvas.bind("<MouseWheel>", self._on_wheel)
        self.canvas.bind("<Configure>", self._on_resize)
        root.bind("<plus>", lambda e: self._zoom(self.zoom_in))
        root.bind("<minus>", lambda e: self._zoom(self.zoom_out))
        root.bind("<Key-0>", lambda e: self._zoom(self.zoom_fit))

    def _zoom(self, action, *args):
        action(*args)
        self.render()

    def _on_wheel(self, event):
        action = self.zoom_in if event.delta > 0 else self.zoom_out
        self._zoom(action, event.x, event.y)

    def _on_drag(self, event):
        if self.update_pan(event.x, event.y):
            self.render()

    def _on_resize(self, event):
        if (event.width, event.height) != (self.canvas_width, self.canvas_height):
            self.canvas_width, self.canvas_height = event.width, event.height
            self.needs_center = True
            self.render()

    def _zoom_around(self, factor, center_x, center_y):
        if center_x is None:
            center_x = self.canvas_width / 2
        if center_y is None:
            center_y = self.canvas_height / 2

        old_zoom = self.zoom_level
        self.zoom_level = min(max(self.zoom_level * factor, self.MIN_ZOOM), self.MAX_ZOOM)

        # Keep the point under the cursor fixed
        ratio = self.zoom_level / old_zoom
        self.pan_offset[0] = center_x - (center_x - self.pan_offset[0]) * ratio
        self.pan_offset[1] = center_y - (center_y - self.pan_offset[1]) * ratio

    def zoom_in(self, center_x=None, center_y=None):
        self._zoom_around(self.ZOOM_STEP, center_x, center_y)

    def zoom_out(self, center_x=None, center_y=None):
        self._zoom_around(1 / self.ZOOM_STEP, center_x, center_y)

    def zoom_fit(self):
        self.zoom_level = 1.0
        self.pan_offset = [0.0, 0.0]
        self.needs_center = True

    def effective_scale(self):
        return self.fit_scale * self.zoom_level

    def canvas_to_surface_coords(self, canvas_x, canvas_y):
        scale = self.effective_scale()
        return ((canvas_x - self.pan_offset[0]) / scale,
                (canvas_y - self.pan_offset[1]) / scale)

    def surface_to_canvas_coords(self, x, y):
        scale = self.effective_scale()
        return (x * scale + self.pan_offset[0],
                y * scale + self.pan_offset[1])

    def compose(self):
        """
        Build the canvas-sized RGB frame for the current zoom and pan.

        Returns:
            numpy array of shape (canvas_height, canvas_width, 3)
        """
        frame = self.surface.ctx.buffer
        height, width = frame.shape[:2]

        self.fit_scale = min(self.canvas_width / width, self.canvas_height / height)
        scale = self.effective_scale()
        new_width = max(1, int(width * scale))
        new_height = max(1, int(height * scale))

        if self.needs_center:
            self.pan_offset = [(self.canvas_width - new_width) / 2.0,
                               (self.canvas_height - new_height) / 2.0]
            self.needs_center = False

        view = np.full((self.canvas_height, self.canvas_width, 3), BACKDROP, dtype=np.uint8)
        scaled = cv3.resize(frame, new_width, new_height)

        x_offset = int(max(0, self.pan_offset[0]))
        y_offset = int(max(0, self.pan_offset[1]))
        src_x = int(max(0, -self.pan_offset[0]))
        src_y = int(max(0, -self.pan_offset[1]))
        src_x_end = int(min(new_width, src_x + self.canvas_width - x_offset))
        src_y_end = int(min(new_height, src_y + self.canvas_height - y_offset))

        if src_x_end > src_x and src_y_end > src_y:
            visible = scaled[src_y:src_y_end, src_x:src_x_end]
            h, w = visible.shape[:2]
            view[y_offset:y_offset + h, x_offset:x_offset + w] = visible
        return view

    def render(self):
        self.photo = ImageTk.PhotoImage(image=Image.fromarray(self.compose()))
        self.canvas.delete("all")
        self.canvas.create_image(0, 0, anchor=tk.NW, image=self.photo)

    def start_pan(self, x, y):
        self.drag_start = (x, y)

    def update_pan(self, x, y):
        """Move the view by the drag distance. Returns True if the view changed."""
        if self.drag_start is None:
            return False
        self.pan_offset[0] += x - self.drag_start[0]
        self.pan_offset[1] += y - self.drag_start[1]
        self.drag_start = (x, y)
        return True

    def end_pan(self):
        self.drag_start = None
