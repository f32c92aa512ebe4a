"""Image export utilities for rendered images.

Rendered images are float64 arrays of shape (H, W, 3) holding intensities in
[0, 256). Export truncates them to integers in [0, 255].

Supported formats:
    - PPM (plain-text P3, written directly)
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from lumen.preview.export import save_image
    >>> image = camera.render(scene)
    >>> save_image(image, "output.ppm")
    >>> save_image(image, "output.png")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

# Largest value of a color component in exported images
MAX_COLOR_VALUE = 255

SUPPORTED_FORMATS = (".ppm", ".png")


def to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Truncate output intensities to 8-bit integers.

    Args:
        image: Image array of shape (H, W, 3) with values in [0, 256).

    Returns:
        Array of the same shape with dtype uint8.

    Raises:
        ValueError: If the array is not an (H, W, 3) image.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")
    return np.clip(image, 0, MAX_COLOR_VALUE).astype(np.uint8)


def format_ppm(image: npt.NDArray[np.floating]) -> str:
    """Format an image as plain-text PPM.

    The header is 'P3', then '<width> <height>', then the maximum value.
    Each following line holds one pixel as 'r g b', rows from top to bottom.
    """
    pixels = to_uint8(image)
    height, width, _ = pixels.shape
    lines = ["P3", f"{width} {height}", str(MAX_COLOR_VALUE)]
    lines.extend(f"{r} {g} {b}" for r, g, b in pixels.reshape(-1, 3).tolist())
    return "\n".join(lines) + "\n"


def write_ppm(image: npt.NDArray[np.floating], filepath: str | Path) -> None:
    """Write an image as a plain-text PPM file."""
    Path(filepath).write_text(format_ppm(image))


def read_ppm_header(source: str | Path) -> tuple[int, int, int]:
    """Parse the header of a plain-text PPM file.

    Args:
        source: Path to a PPM file.

    Returns:
        Tuple of (width, height, max_value).

    Raises:
        ValueError: If the header is malformed.
    """
    tokens: list[str] = []
    with Path(source).open() as f:
        for line in f:
            # Comments run to the end of the line
            tokens.extend(line.split("#", 1)[0].split())
            if len(tokens) >= 4:
                break

    if len(tokens) < 4 or tokens[0] != "P3":
        raise ValueError(f"Not a plain-text PPM file: {source}")
    try:
        width, height, max_value = (int(token) for token in tokens[1:4])
    except ValueError as err:
        raise ValueError(f"Malformed PPM header in {source}: {err}") from err
    return width, height, max_value


def save_png(image: npt.NDArray[np.floating], filepath: str | Path) -> None:
    """Save an image as an 8-bit RGB PNG file using Pillow."""
    pil_image = PILImage.fromarray(to_uint8(image))
    pil_image.save(filepath)


def save_image(image: npt.NDArray[np.floating], filepath: str | Path) -> Path:
    """Save an image, choosing the format from the file extension.

    Args:
        image: Image array of shape (H, W, 3) with values in [0, 256).
        filepath: Output path ending in .ppm or .png.

    Returns:
        The output path.

    Raises:
        ValueError: If the extension is not supported.
    """
    path = Path(filepath)
    suffix = path.suffix.lower()
    if suffix == ".ppm":
        write_ppm(image, path)
    elif suffix == ".png":
        save_png(image, path)
    else:
        raise ValueError(
            f"Unsupported output format '{suffix}'. "
            f"Supported formats: {', '.join(SUPPORTED_FORMATS)}"
        )
    logger.info("Wrote %dx%d image to %s", image.shape[1], image.shape[0], path)
    return path
