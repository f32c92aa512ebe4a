"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PPM/PNG image export utilities

Example:
    >>> from lumen.preview import save_image, show_image
    >>> image = camera.render(scene)
    >>> save_image(image, "output.png")
    >>> show_image(image)
"""

from lumen.preview.display import show_image
from lumen.preview.export import (
    SUPPORTED_FORMATS,
    format_ppm,
    read_ppm_header,
    save_image,
    save_png,
    to_uint8,
    write_ppm,
)

__all__ = [
    "show_image",
    "SUPPORTED_FORMATS",
    "format_ppm",
    "read_ppm_header",
    "save_image",
    "save_png",
    "to_uint8",
    "write_ppm",
]
