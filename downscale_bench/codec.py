"""Single-image downscale codec.

Resizes an image to a target width (aspect ratio preserved) and re-encodes
it as JPEG in memory. Output is deterministic for identical input, which is
what makes content addressing in the cache work.
"""

import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from downscale_bench.errors import CodecError

#: Extension used for every cached rendition.
ENCODED_EXTENSION = ".jpg"

#: Fixed JPEG quality for re-encoded renditions.
JPEG_QUALITY = 85

#: Upper bound on the pixel count of a rendition.
MAX_TARGET_PIXELS = 100_000_000


def target_height(width: int, height: int, target_width: int) -> int:
    """Height that keeps the aspect ratio at *target_width* (at least 1 px)."""
    return max(1, round(height * target_width / width))


def downscale_image(image: Path | str | bytes, width: int) -> bytes:
    """Downscale an image to the given width and encode it as JPEG.

    Args:
        image: Path to the source image, or its raw encoded bytes
        width: Target width in pixels (must be positive)

    Returns:
        JPEG-encoded bytes of the resized image

    Raises:
        CodecError: If the input cannot be decoded or the target is too large
        OSError: If the source file cannot be opened
        ValueError: If *width* is not positive
    """
    if width <= 0:
        msg = f"Target width must be positive, got {width}"
        raise ValueError(msg)

    if isinstance(image, bytes):
        label = "<bytes>"
        source: Path | io.BytesIO = io.BytesIO(image)
    else:
        label = str(image)
        source = Path(image)

    try:
        with Image.open(source) as img:
            size = (width, target_height(img.width, img.height, width))
            if size[0] * size[1] > MAX_TARGET_PIXELS:
                reason = f"target size {size[0]}x{size[1]} exceeds {MAX_TARGET_PIXELS} pixels"
                raise CodecError(label, width, reason)
            resized = img.resize(size, Image.Resampling.LANCZOS)
    except (FileNotFoundError, PermissionError, IsADirectoryError, NotADirectoryError):
        # Filesystem failures stay I/O errors, only decode failures are codec errors
        raise
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError, MemoryError) as e:
        raise CodecError(label, width, str(e)) from e

    # JPEG has no alpha channel; flatten onto white like the preprocessor does
    if resized.mode == "RGBA":
        rgb_img = Image.new("RGB", resized.size, (255, 255, 255))
        rgb_img.paste(resized, mask=resized.split()[3])
        resized = rgb_img
    elif resized.mode != "RGB":
        resized = resized.convert("RGB")

    buf = io.BytesIO()
    resized.save(buf, format="JPEG", quality=JPEG_QUALITY)
    return buf.getvalue()
