import sys
import numpy as np
from matplotlib.figure import Figure
from matplotlib.collections import LineCollection

def plot_segments(segments, image_filename='segment_plot.png',
                  colors=None, widths=None):

    segments = np.asarray(segments, dtype=float)

    assert len(segments.shape) == 3 and segments.shape[1:] == (2, 2)

    # no pyplot, so no global figure or backend state
    fig = Figure()

    ax = fig.add_subplot()

    if len(segments):

        lc = LineCollection(segments,
                            colors=colors if colors else 'b',
                            linewidths=widths if widths else 1.0)

        ax.add_collection(lc)
        ax.autoscale()

    ax.set_aspect('equal')
    ax.axis('off')

    fig.savefig(image_filename, format='png')


if __name__ == '__main__':

    segments = np.genfromtxt('segments.txt').reshape(-1, 2, 2)

    filename = sys.argv[1] if len(sys.argv) > 1 else 'segment_plot.png'

    plot_segments(segments, filename)
    print('wrote', filename)
