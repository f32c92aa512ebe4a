"""Top-level render loop with progress reporting.

The Renderer uploads a scene and camera, then renders the image a batch of
rows at a time. After each batch it reports (completed_pixels, total_pixels)
to an optional callback, or yields the same pair from render_progressive().

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from lumen.core.renderer import Renderer
    >>> from lumen.scene.presets import create_showcase_scene
    >>>
    >>> scene, camera = create_showcase_scene()
    >>> renderer = Renderer(camera, scene)
    >>> image = renderer.render(callback=lambda done, total: None)
    >>> image.shape
    (225, 400, 3)
"""

import logging
import time
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from lumen.camera.camera import Camera, setup_camera
from lumen.core.integrator import render_rows

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (completed_pixels, total_pixels)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders a scene through a camera into a NumPy image.

    Attributes:
        camera: The camera configuration.
        scene: The scene to render.
        rows_per_batch: Number of image rows rendered between progress
            reports.
    """

    def __init__(self, camera: Camera, scene, rows_per_batch: int = 8) -> None:
        """Initialize the renderer.

        Args:
            camera: The camera configuration.
            scene: The Scene to render.
            rows_per_batch: Rows rendered per kernel launch. Must be
                positive.

        Raises:
            ValueError: If rows_per_batch is not positive.
        """
        if rows_per_batch <= 0:
            raise ValueError(f"Rows per batch = {rows_per_batch} must be positive")
        self.camera = camera
        self.scene = scene
        self.rows_per_batch = rows_per_batch
        self._image: npt.NDArray[np.float64] | None = None

    @property
    def width(self) -> int:
        """Get the image width."""
        return int(self.camera.image_width)

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.camera.image_height

    @property
    def total_pixels(self) -> int:
        """Number of pixels in the image."""
        return self.width * self.height

    @property
    def image(self) -> npt.NDArray[np.float64] | None:
        """The image of the last render, or None before the first one."""
        return self._image

    def render(self, callback: ProgressCallback | None = None) -> npt.NDArray[np.float64]:
        """Render the full image.

        Args:
            callback: Optional callback called after each batch of rows.
                Receives (completed_pixels, total_pixels).

        Returns:
            Float64 array of shape (height, width, 3) with intensities in
            [0, 256), row 0 at the top.

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} pixels")
            >>> image = renderer.render(callback=progress)
        """
        for completed, total in self.render_progressive():
            if callback is not None:
                callback(completed, total)
        return self._image

    def render_progressive(self) -> Generator[tuple[int, int], None, None]:
        """Render the image, yielding progress after each batch of rows.

        The image is available from the image property once the generator
        is exhausted.

        Yields:
            Tuple of (completed_pixels, total_pixels).
        """
        width = self.width
        height = self.height
        total = self.total_pixels

        self.scene.upload()
        setup_camera(self.camera)
        self._image = np.zeros((height, width, 3), dtype=np.float64)

        logger.info(
            "Rendering %dx%d image, %d samples per pixel, max depth %d, %d spheres",
            width,
            height,
            self.camera.samples_per_pixel,
            self.camera.max_depth,
            len(self.scene),
        )
        start = time.perf_counter()

        for row_start in range(0, height, self.rows_per_batch):
            row_end = min(row_start + self.rows_per_batch, height)
            render_rows(
                self._image,
                row_start,
                row_end,
                self.camera.samples_per_pixel,
                self.camera.max_depth,
            )
            yield (row_end * width, total)

        logger.info("Render finished in %.2fs", time.perf_counter() - start)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples={self.camera.samples_per_pixel}, max_depth={self.camera.max_depth})"
        )
