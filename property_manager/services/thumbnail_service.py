import io

from PIL import Image

from property_manager.config import settings

THUMBNAIL_CONTENT_TYPE = "image/jpeg"


def is_thumbnailable(content_type: str) -> bool:
    """Only images get thumbnails; PDFs fall back to the full document."""
    return content_type.lower().startswith("image/")


def generate_thumbnail(image_bytes: bytes, max_size: int | None = None, quality: int = 80) -> bytes:
    """
    Render a JPEG thumbnail that fits inside a max_size x max_size box.

    Aspect ratio is preserved; images already smaller than the box are not
    upscaled.

    Raises:
        PIL.UnidentifiedImageError / OSError: If the bytes are not a readable image
    """
    bound = max_size or settings.THUMBNAIL_MAX_SIZE
    with Image.open(io.BytesIO(image_bytes)) as im:
        im = im.convert("RGB")
        im.thumbnail((bound, bound), Image.LANCZOS)
        buf = io.BytesIO()
        im.save(buf, format="JPEG", quality=quality, optimize=True)
    return buf.getvalue()
