"""Blank canvas images used as an output-size hint.

Both backends size their output after the last supplied image, so a blank
canvas of the target size is appended after the caller's reference images.
A perfectly uniform white image risks being rejected as blank, hence the
barely visible border.
"""
import base64
import io

from PIL import Image, ImageDraw

from media.aspect_ratio import AspectRatioConfig
from utils.logging_config import get_logger

logger = get_logger(__name__)

CANVAS_COLOR = (255, 255, 255)
BORDER_COLOR = (250, 250, 250)

# Small pre-rendered white PNGs, used when the canvas cannot be rendered
FALLBACK_CANVASES = {
    # 100x100 white square (1:1)
    "square": "iVBORw0KGgoAAAANSUhEUgAAAGQAAABkCAIAAAD/gAIDAAAAaklEQVR42u3QMQEAAAjAoNm/tCU8HAAA4NMCriwAAysLzMAKAysLzMAKAysLzMAKAysLzMAKAysLzMAKAysLzMAKAysLzMAKAysLzMAKAysLzMAKAysLzMAKAysLzMAKAysLzMAKAysL+FoBTL0F3UMHQMAAAAAASUVORK5CYII=",
    # 160x90 white rectangle (16:9)
    "landscape": "iVBORw0KGgoAAAANSUhEUgAAAKAAAABaCAIAAACOuu7MAAAAaklEQVR42u3QIQEAAAjAoNm/tDP8DwAAAAAAAAAAfKTBOjgAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAMBbAdW1BN0ZvW8UAAAAAElFTkSuQmCC",
    # 90x160 white rectangle (9:16)
    "portrait": "iVBORw0KGgoAAAANSUhEUgAAAFoAAACgCAIAAAAaBO6CAAAAaklEQVR42u3QMQEAAAjAoNm/tBf8DgAAAAAAAAAAAAAAAAAAfFSHDgAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAP7VAaxDBbwC3cFJNbQKAAAAAElFTkSuQmCC",
    # 160x100 white rectangle (16:10)
    "widescreen": "iVBORw0KGgoAAAANSUhEUgAAAKAAAABkCAIAAACO3jADAAAAaklEQVR42u3QIQEAAAjAoNm/tDP8DwAAAAAAAAAAAADfaTAOAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAN4CoP0E3T6XVXsAAAAASUVORK5CYII=",
}
FALLBACK_CANVASES["default"] = FALLBACK_CANVASES["square"]

FALLBACK_RATIOS = {
    "square": 1.0,
    "landscape": 160 / 90,
    "portrait": 90 / 160,
    "widescreen": 160 / 100,
}


def render_canvas(width: int, height: int) -> bytes:
    """Render a near-white PNG canvas of exactly width x height pixels."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid canvas dimensions: {width}x{height}")

    image = Image.new("RGB", (width, height), CANVAS_COLOR)
    draw = ImageDraw.Draw(image)
    draw.rectangle((0, 0, width - 1, height - 1), outline=BORDER_COLOR, width=1)

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def fallback_canvas_image(config: AspectRatioConfig) -> str:
    """Pick the pre-rendered canvas matching the label, else the nearest ratio."""
    if config.name in FALLBACK_RATIOS:
        return FALLBACK_CANVASES[config.name]

    if config.height <= 0 or config.width <= 0:
        return FALLBACK_CANVASES["default"]

    ratio = config.width / config.height
    key = min(FALLBACK_RATIOS, key=lambda name: abs(FALLBACK_RATIOS[name] - ratio))
    return FALLBACK_CANVASES[key]


def generate_canvas_image(config: AspectRatioConfig) -> str:
    """
    Produce the dimension-hint canvas for an aspect ratio as base64 PNG data.

    Rendering failures are logged and answered with a pre-rendered canvas;
    they never fail the generation request.
    """
    try:
        png = render_canvas(config.width, config.height)
    except (ValueError, OSError) as e:
        logger.warning(
            f"Could not render {config.width}x{config.height} canvas, using fallback: {e}"
        )
        return fallback_canvas_image(config)

    return base64.b64encode(png).decode("ascii")
