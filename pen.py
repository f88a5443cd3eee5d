######################################################################
#
# pen.py
#
# A minimal turtle: keeps a position, a heading in degrees, a stroke
# color and width, and records a line segment for every pen-down move.
# Segments are rendered to PNG by plot_segments.
#
# Heading 0 points along +x; positive rotation is counter-clockwise
# (towards +y).
#
######################################################################

import os
import numpy as np

from lsys_commands import SaveError
from plot_segments import plot_segments

SUPPORTED_EXTENSIONS = ('.png',)

class Pen:

    def __init__(self, x=0.0, y=0.0, angle_deg=0.0):

        self.x = float(x)
        self.y = float(y)
        self.angle_deg = float(angle_deg)

        self.color = (0, 0, 0, 255)
        self.width = 1.0
        self.is_down = True

        # each entry is (start, end, color, width)
        self.strokes = []

    def pen_up(self):
        self.is_down = False

    def pen_down(self):
        self.is_down = True

    def set_color(self, color):
        self.color = tuple(color)

    def set_width(self, width):
        self.width = float(width)

    def rotate(self, angle_deg):
        self.angle_deg += angle_deg

    def move(self, distance):

        cur_theta = self.angle_deg * np.pi / 180

        new_x = self.x + distance * np.cos(cur_theta)
        new_y = self.y + distance * np.sin(cur_theta)

        if self.is_down:
            self.strokes.append(((self.x, self.y), (new_x, new_y),
                                 self.color, self.width))

        self.x, self.y = float(new_x), float(new_y)

    # n-by-2-by-2 array of [(x0, y0), (x1, y1)]
    def segments(self):

        if not self.strokes:
            return np.zeros((0, 2, 2))

        return np.array([[start, end] for start, end, _, _ in self.strokes])

    def save(self, filename):
        """Render the recorded strokes to filename.

        The format follows the extension; only .png is supported. Raises
        SaveError for any other extension or if writing fails.
        """

        ext = os.path.splitext(filename)[1].lower()

        if ext not in SUPPORTED_EXTENSIONS:
            raise SaveError('unsupported image format: {!r}'.format(ext or filename))

        colors = [np.array(c) / 255. for _, _, c, _ in self.strokes]
        widths = [w for _, _, _, w in self.strokes]

        try:
            plot_segments(self.segments(), filename, colors=colors, widths=widths)
        except OSError as err:
            raise SaveError('could not write {}: {}'.format(filename, err)) from err
