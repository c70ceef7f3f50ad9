"""
Various constants for productpic
"""
from enum import Enum


class BackgroundKind(str, Enum):
    """
    Background kinds.
    """
    TRANSPARENT = "transparent"
    SOLID = "solid"
    GRADIENT = "gradient"
    CHECKER = "checker"


class LoadStatus(Enum):
    """
    Outcome of a bitmap load request.
    """
    LOADED = "loaded"
    CLEARED = "cleared"
    STALE = "stale"
    FAILED = "failed"


class ExportStatus(Enum):
    """
    Outcome of an export request.
    """
    EXPORTED = "exported"
    UNAVAILABLE = "unavailable"


class DeliveryStatus(Enum):
    """
    Final outcome of a delivery chain.
    """
    SHARED = "shared"
    COPIED = "copied"
    DOWNLOADED = "downloaded"
    FAILED = "failed"


class AttemptStatus(Enum):
    """
    Outcome of a single delivery channel attempt.
    """
    SUCCEEDED = "succeeded"
    UNSUPPORTED = "unsupported"
    FAILED = "failed"


# Checker pattern used for transparent and checker backgrounds.
CHECKER_TILE_SIZE = 32
CHECKER_ODD_COLOR = "#e5e7eb"
CHECKER_EVEN_COLOR = "#f3f4f6"

# Fill used in place of a color string that cannot be parsed.
INVALID_COLOR = "#000000"

# Product placement, relative to the surface.
PRODUCT_BOX_WIDTH = 0.8
PRODUCT_BOX_HEIGHT = 0.7
PRODUCT_ANCHOR_X = 0.5
PRODUCT_ANCHOR_Y = 0.55

# Shadow ellipse, relative to the product draw size.
SHADOW_SQUASH = 0.15
SHADOW_RADIUS_X = 0.35
SHADOW_RADIUS_Y = 0.18
SHADOW_OPACITY_RANGE = (0.0, 0.6)

TEXT_POSITION_RANGE = (0.0, 1.0)
BOLD_WEIGHT = 600

# Sans-serif fallback stack, tried in order.
SANS_SERIF_FONTS = (
    "DejaVuSans.ttf",
    "LiberationSans-Regular.ttf",
    "Arial.ttf",
    "arial.ttf",
    "Helvetica.ttc",
    "segoeui.ttf",
    "Roboto-Regular.ttf",
)
SANS_SERIF_BOLD_FONTS = (
    "DejaVuSans-Bold.ttf",
    "LiberationSans-Bold.ttf",
    "Arial Bold.ttf",
    "arialbd.ttf",
    "Helvetica.ttc",
    "segoeuib.ttf",
    "Roboto-Bold.ttf",
)

PNG_MIME_TYPE = "image/png"
EXPORT_FILENAME = "product-pic.png"
SHARE_FILENAME = "product-design-%d.png"
SHARE_TITLE = "Product Pic"
SHARE_TEXT = "Made with Product Pic Designer"

CLIPBOARD_COPIED_NOTICE = "Copied image to clipboard!"
CLIPBOARD_UNSUPPORTED_NOTICE = "Clipboard copy not supported on this system."

DOWNLOAD_DIR_ENV = "PRODUCTPIC_DOWNLOAD_DIR"
