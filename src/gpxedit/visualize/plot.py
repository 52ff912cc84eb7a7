# gpxedit/visualize/plot.py
"""
Plotting routines for gpxedit

Both functions return the Figure; callers decide whether to show or save it.
"""

import matplotlib.pyplot as plt

from gpxedit.model import TimeBasedPoint


def plot_elevation(points, *, active_index=None, selection=None, title="Elevation profile"):
    """Elevation by point index, with the selected range shaded and the active point marked."""
    xs = list(range(len(points)))
    eles = [p.elevation for p in points]

    fig, ax = plt.subplots(figsize=(10, 3))
    ax.plot(xs, eles, color="tab:blue", linewidth=1)

    if selection is not None:
        start, end = selection
        ax.axvspan(start, end, color="tab:blue", alpha=0.15, label="selection")

    if active_index is not None and points[active_index].elevation is not None:
        ax.plot([active_index], [points[active_index].elevation], "o", color="orange",
                label="active point")

    ax.set_xlabel("Point")
    ax.set_ylabel("Elevation (m)")
    ax.set_title(title)
    if selection is not None or active_index is not None:
        ax.legend(loc="upper right")
    fig.tight_layout()
    return fig


def plot_track(points, *, active_index=None, title=None):
    """Lon/lat scatter coloured by speed (tracks) or elevation (routes)."""
    lats = [p.lat for p in points]
    lons = [p.lon for p in points]

    if points and isinstance(points[0], TimeBasedPoint):
        values = [p.speed or 0.0 for p in points]
        label = "Speed (m/s)"
    else:
        values = [p.elevation if p.elevation is not None else 0.0 for p in points]
        label = "Elevation (m)"

    fig, ax = plt.subplots(figsize=(8, 6))
    sc = ax.scatter(lons, lats, c=values, s=5, cmap="viridis")
    fig.colorbar(sc, ax=ax, label=label)

    if active_index is not None:
        ax.plot([lons[active_index]], [lats[active_index]], "o", color="orange", markersize=8)

    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_title(title or f"Track coloured by {label.split(' ')[0].lower()}")
    return fig
