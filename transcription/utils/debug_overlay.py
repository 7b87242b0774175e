"""
Keep-area debug images.

Renders each page of the content window with the keep-rectangle outlined
and every character baseline marked green (kept) or red (dropped), so
margin settings can be checked by eye.
"""

import logging
from pathlib import Path
from typing import Tuple

from PIL import Image, ImageDraw
from tqdm import tqdm

from docmodel.geometry import Margins, Point, Rectangle, contains, inset_margins
from docmodel.page.models import EventKind

from ..errors import OutputWriteError, PageDecodeError

logger = logging.getLogger(__name__)

KEEP_COLOR = (50, 160, 50)
DROP_COLOR = (220, 40, 40)
AREA_COLOR = (50, 130, 200)


def draw_keep_area(
    image: Image.Image,
    page,
    keep: Rectangle,
    scale: float,
    line_width: int = 2,
) -> Image.Image:
    """
    Draw *keep* and the page's character baselines onto a copy of *image*.

    Args:
        image: Page rendering at *scale*.
        page:  The rendered :class:`~docmodel.page.PageModel`.
        keep:  Keep-rectangle in the page's y-up frame.
        scale: Pixels per page unit.
    """
    img = image.copy()
    draw = ImageDraw.Draw(img, "RGBA")
    box = page.bounding_box

    def to_pixels(point: Point) -> Tuple[float, float]:
        # y-up page frame -> y-down image
        return (point.x - box.x) * scale, (box.top - point.y) * scale

    x0, y0 = to_pixels(Point(keep.x, keep.top))
    x1, y1 = to_pixels(Point(keep.right, keep.y))
    draw.rectangle([x0, y0, x1, y1], fill=(*AREA_COLOR, 25))
    for i in range(line_width):
        draw.rectangle([x0 - i, y0 - i, x1 + i, y1 + i], outline=AREA_COLOR)

    for event in page.events():
        if event.kind is not EventKind.RENDER_TEXT:
            continue
        for char in event.run.character_runs():
            color = KEEP_COLOR if contains(keep, char.bounding_box) else DROP_COLOR
            draw.line([to_pixels(char.start), to_pixels(char.end)], fill=color, width=1)

    return img.convert("RGB")


def save_debug_layouts(
    document,
    window,
    margins: Margins,
    scale: float,
    output_dir: str,
    disable_progress: bool = True,
) -> None:
    """Save one keep-area overlay PNG per page of *window* to *output_dir*."""
    out = Path(output_dir)
    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(f"Failed to create debug directory '{out}': {e}") from e

    pages = tqdm(
        window.pages,
        desc="Rendering debug images",
        unit="page",
        disable=disable_progress,
    )
    for index in pages:
        page = document.page(index)
        keep = inset_margins(page.bounding_box, margins)
        try:
            img = page.render_to_image(scale=scale)
            annotated = draw_keep_area(img, page, keep, scale)
        except Exception as e:
            raise PageDecodeError(f"Failed to render page {index}: {e}") from e
        finally:
            page.unload()

        path = out / f"page_{index:03d}.png"
        try:
            annotated.save(str(path))
        except OSError as e:
            raise OutputWriteError(f"Failed to save debug image '{path}': {e}") from e
        logger.debug("Saved keep-area debug image: %s", path)

    logger.info("Keep-area debug images saved to %s/", out)
