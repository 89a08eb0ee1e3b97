"""Draw a puzzle controller with matplotlib.

Stickers of the displayed state are projected with `sticker_geometry` and
added to an `Axes` as `Polygon` patches.  Depth is turned into ``zorder`` so
nearer stickers are drawn on top; this is a painter's algorithm and can show
small artifacts where stickers interpenetrate during a twist.

- draw onto existing axes with ``draw_puzzle(ax, controller)``.
- make a figure with ``render(controller).savefig(fn)``.
"""

from __future__ import annotations

from collections.abc import Sequence
import sys

from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Polygon
import matplotlib.pyplot as plt

from hypercube.config import Preferences, get_preferences
from hypercube.controller import PuzzleController
from hypercube.geometry import sticker_geometry
from hypercube.logging_config import setup_logging
from hypercube.projection import Quaternion, StickerGeometryParams
from hypercube.topology import PuzzleType

# indexed by face: R L U D F B O I
default_face_colors: list[str] = [
    "#cf0000",
    "#ff6f00",
    "w",
    "#ffcf00",
    "#009f0f",
    "#00008f",
    "#7f00ff",
    "gray",
]
default_plastic_color: str = "black"


def draw_puzzle(
    ax: Axes,
    controller: PuzzleController,
    prefs: Preferences | None = None,
    view: Quaternion | None = None,
    face_colors: Sequence[str] | None = None,
    plastic_color: str | None = None,
) -> list[Polygon]:
    """Add one patch per visible sticker polygon to `ax` and return them."""
    if prefs is None:
        prefs = get_preferences()
    if face_colors is None:
        face_colors = default_face_colors
    if plastic_color is None:
        plastic_color = default_plastic_color

    state = controller.displayed
    params = StickerGeometryParams.new(prefs.gfx, controller.puzzle_type, controller.current_twist(), view)

    patches: list[Polygon] = []
    for sticker, info in enumerate(state.desc.stickers):
        geometry = sticker_geometry(state, sticker, params)
        if geometry is None:
            continue
        for xy, depth in zip(geometry.polygon_xys(), geometry.polygon_depths()):
            patch = Polygon(
                xy,
                closed=True,
                facecolor=face_colors[info.color],
                edgecolor=plastic_color,
                linewidth=0.5,
                alpha=prefs.gfx.opacity,
                zorder=depth,
            )
            ax.add_patch(patch)
            patches.append(patch)
    return patches


def render(controller: PuzzleController, prefs: Preferences | None = None, size: float = 5.0) -> Figure:
    """Draw `controller` on a new figure."""
    if prefs is None:
        prefs = get_preferences()
    fig = plt.figure(figsize=(size, size))
    ax = fig.add_axes((0, 0, 1, 1), frameon=False, xticks=[], yticks=[])
    draw_puzzle(ax, controller, prefs)
    lim = 2.0 * prefs.gfx.scale
    ax.set_xlim(-lim, lim)
    ax.set_ylim(-lim, lim)
    ax.set_aspect("equal")
    return fig


def main() -> None:
    """Save a picture of a scrambled 4D puzzle: ``python -m hypercube.render [N] [filename]``."""
    setup_logging()
    try:
        n = int(sys.argv[1])
    except (IndexError, ValueError):
        n = 3
    filename = sys.argv[2] if len(sys.argv) > 2 else f"hypercube{n}.png"

    c = PuzzleController(PuzzleType.rubiks_4d(n))
    c.scramble_n(2 * n)
    fig = render(c)
    fig.savefig(filename, dpi=150)
    plt.close(fig)


if __name__ == "__main__":
    main()
