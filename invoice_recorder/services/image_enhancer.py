"""
Image Enhancer

Normalizes photographed or scanned invoices into high-contrast grayscale
before OCR.
"""

import io
import math

from PIL import Image, ImageOps

# Rec. 709 luma weights, RGB -> L
GRAYSCALE_MATRIX = (0.2126, 0.7152, 0.0722, 0)

# Contrast level in [-1, 1); 0.5 scales distances from the pivot by 3
CONTRAST_LEVEL = 0.5
CONTRAST_PIVOT = 127
JPEG_QUALITY = 100


def grayscale(image: Image.Image) -> Image.Image:
    """Convert to single-channel luma using Rec. 709 weights."""
    if image.mode == "L":
        return image.copy()
    if image.mode != "RGB":
        image = image.convert("RGB")
    return image.convert("L", matrix=GRAYSCALE_MATRIX)


def contrast_table(level: float = CONTRAST_LEVEL) -> list:
    """
    Build the 256-entry lookup table for a contrast adjustment.

    Every grey value is pushed away from a fixed pivot by
    ``(level + 1) / (1 - level)``, floored and clamped to 0..255.
    """
    if not -1 <= level < 1:
        raise ValueError(f"Contrast level must be in [-1, 1), got {level}")

    factor = (level + 1) / (1 - level)
    return [
        max(0, min(255, math.floor(factor * (value - CONTRAST_PIVOT) + CONTRAST_PIVOT)))
        for value in range(256)
    ]


def enhance(image: Image.Image, contrast_level: float = CONTRAST_LEVEL) -> Image.Image:
    """
    Prepare an image for text recognition.

    Steps, in order: grayscale, contrast boost, histogram normalization.
    The input image is left untouched.

    Args:
        image: Decoded source image
        contrast_level: Contrast adjustment in [-1, 1) (0 leaves contrast unchanged)

    Returns:
        A new grayscale ("L" mode) image
    """
    gray = grayscale(image)
    contrasted = gray.point(contrast_table(contrast_level))
    return ImageOps.autocontrast(contrasted)


def encode_jpeg(image: Image.Image, quality: int = JPEG_QUALITY) -> bytes:
    """Re-encode an image as JPEG at the given quality."""
    if image.mode not in ("L", "RGB"):
        image = image.convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()
