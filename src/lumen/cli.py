"""Command-line interface for rendering scenes.

Renders a built-in preset or a JSON scene file and writes the result as a
PPM or PNG image.

Usage:
    lumen [options]
    python -m lumen.cli [options]

Options:
    --scene FILE          JSON scene file (default: the showcase preset)
    --preset NAME         Built-in scene: showcase or two-spheres
    --output FILE         Output image, .ppm or .png (default: output.ppm)
    --width N             Image width in pixels
    --aspect-ratio R      Width / height
    --vfov DEG            Vertical field of view in degrees
    --samples N           Samples per pixel
    --max-depth N         Maximum ray bounces
    --lookfrom X Y Z      Camera position
    --lookat X Y Z        Camera target
    --vup X Y Z           Camera up direction
    --seed N              Random seed for the Taichi runtime
    --rows-per-batch N    Rows rendered between progress updates (default: 8)
    --show                Display the result in a Matplotlib window
    --quiet               Suppress the progress bar
    -v, --verbose         Increase log verbosity (-v info, -vv debug)

Example:
    lumen --width 200 --samples 20 --output showcase.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti
from tqdm import tqdm

logger = logging.getLogger("lumen")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

PRESETS = ("showcase", "two-spheres")

# Command-line options that map onto Camera fields
CAMERA_OPTIONS = {
    "width": "image_width",
    "aspect_ratio": "aspect_ratio",
    "vfov": "vfov",
    "samples": "samples_per_pixel",
    "max_depth": "max_depth",
    "lookfrom": "lookfrom",
    "lookat": "lookat",
    "vup": "vup",
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="lumen",
        description="Render a scene of spheres with a Monte Carlo path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--scene",
        type=Path,
        default=None,
        help="JSON scene file (default: the showcase preset)",
    )
    source.add_argument(
        "--preset",
        choices=PRESETS,
        default="showcase",
        help="Built-in scene (default: showcase)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("output.ppm"),
        help="Output image path, .ppm or .png (default: output.ppm)",
    )
    parser.add_argument("--width", type=int, default=None, help="Image width in pixels")
    parser.add_argument("--aspect-ratio", type=float, default=None, help="Width / height")
    parser.add_argument("--vfov", type=float, default=None, help="Vertical field of view")
    parser.add_argument("--samples", type=int, default=None, help="Samples per pixel")
    parser.add_argument("--max-depth", type=int, default=None, help="Maximum ray bounces")
    parser.add_argument(
        "--lookfrom", type=float, nargs=3, metavar=("X", "Y", "Z"), help="Camera position"
    )
    parser.add_argument(
        "--lookat", type=float, nargs=3, metavar=("X", "Y", "Z"), help="Camera target"
    )
    parser.add_argument(
        "--vup", type=float, nargs=3, metavar=("X", "Y", "Z"), help="Camera up direction"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=8,
        help="Rows rendered between progress updates (default: 8)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Display the result in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress the progress bar",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    return parser.parse_args(argv)


def configure_logging(verbosity: int = 0) -> None:
    """Send lumen log records to stderr.

    Args:
        verbosity: 0 for warnings, 1 for info, 2 or more for debug.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)


def init_taichi(seed: int | None = None) -> None:
    """Initialize the Taichi CPU runtime in double precision.

    Must run before any lumen module that declares fields is imported.
    """
    kwargs = {"arch": ti.cpu, "default_fp": ti.f64}
    if seed is not None:
        kwargs["random_seed"] = seed
    ti.init(**kwargs)


def camera_overrides(args: argparse.Namespace) -> dict:
    """Collect the camera fields given on the command line."""
    overrides = {}
    for option, field_name in CAMERA_OPTIONS.items():
        value = getattr(args, option)
        if value is not None:
            overrides[field_name] = tuple(value) if isinstance(value, list) else value
    return overrides


def render_scene(
    scene_path: Path | None = None,
    preset: str = "showcase",
    output_path: Path = Path("output.ppm"),
    overrides: dict | None = None,
    rows_per_batch: int = 8,
    show: bool = False,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to a file.

    Args:
        scene_path: JSON scene file. The preset is used when omitted.
        preset: Name of the built-in scene.
        output_path: Output file path (.ppm or .png).
        overrides: Camera fields replacing the scene's camera settings.
        rows_per_batch: Rows rendered between progress updates.
        show: If True, display the image when done.
        quiet: If True, suppress the progress bar.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from lumen.camera.camera import Camera, camera_from_dict
    from lumen.core.renderer import Renderer
    from lumen.preview.export import SUPPORTED_FORMATS, save_image
    from lumen.scene.manager import load_scene_file
    from lumen.scene.presets import create_showcase_scene, create_two_sphere_scene

    # Fail before rendering rather than after
    if output_path.suffix.lower() not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported output format '{output_path.suffix}'. "
            f"Supported formats: {', '.join(SUPPORTED_FORMATS)}"
        )

    if scene_path is not None:
        scene, camera = load_scene_file(scene_path)
        if camera is None:
            camera = Camera()
    elif preset == "two-spheres":
        scene, camera = create_two_sphere_scene()
    else:
        scene, camera = create_showcase_scene()

    if overrides:
        camera = camera_from_dict(overrides, base=camera)

    renderer = Renderer(camera, scene, rows_per_batch=rows_per_batch)
    with tqdm(total=renderer.total_pixels, unit="px", disable=quiet) as progress:
        for completed, _ in renderer.render_progressive():
            progress.update(completed - progress.n)
    image = renderer.image

    saved = save_image(image, output_path)

    if show:
        from lumen.preview.display import show_image

        show_image(image, title=str(saved))

    return saved


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(args.verbose)
    init_taichi(args.seed)

    try:
        output = render_scene(
            scene_path=args.scene,
            preset=args.preset,
            output_path=args.output,
            overrides=camera_overrides(args),
            rows_per_batch=args.rows_per_batch,
            show=args.show,
            quiet=args.quiet,
        )
    except Exception as e:
        logger.error("Render failed: %s", e)
        return 1

    if not args.quiet:
        print(f"Saved to: {output.absolute()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
