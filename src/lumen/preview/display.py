"""Matplotlib-based preview display for rendered images.

Example:
    >>> from lumen.preview.display import show_image
    >>> image = camera.render(scene)
    >>> show_image(image, title="Showcase")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from lumen.preview.export import to_uint8


def show_image(
    image: npt.NDArray[np.floating],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 4.5),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: Image array of shape (H, W, 3) with values in [0, 256).
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(to_uint8(image))
    ax.axis("off")

    if title is None:
        title = f"Render Preview - {image.shape[1]}x{image.shape[0]}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
