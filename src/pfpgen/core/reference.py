"""Identity reference image loading.

A reference image, when configured, is attached to every provider request so
the model keeps the same face and crop while changing the theme.  The file is
read once at startup; Pillow is used to confirm it is a real image and to
determine its MIME type from the decoded format rather than the file suffix.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceImage:
    """Raw image bytes plus their MIME type, ready to send inline."""

    data: bytes
    mime_type: str


def load_reference_image(path: Path | str) -> ReferenceImage:
    """Read and identify a reference image from disk.

    Args:
        path: Location of the image file.

    Returns:
        The loaded :class:`ReferenceImage`.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not an image Pillow can identify.
    """
    path = Path(path)
    data = path.read_bytes()

    try:
        with Image.open(io.BytesIO(data)) as img:
            image_format = img.format
            size = img.size
    except UnidentifiedImageError as e:
        raise ValueError(f"Reference image is not a recognised image file: {path}") from e

    mime_type = Image.MIME.get(image_format or "", "image/png")
    logger.info(f"Loaded reference image {path} ({mime_type}, {size[0]}x{size[1]})")
    return ReferenceImage(data=data, mime_type=mime_type)
