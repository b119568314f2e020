import io
import logging

from PIL import Image

from ..config import JPEG_QUALITY, MAX_DIMENSION, WEBP_QUALITY

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ['.png', '.jpg', '.jpeg', '.svg', '.gif', '.webp', '.ico', '.bmp', '.tiff']

CONTENT_TYPE_MAP = {
    'image/svg+xml': 'svg',
    'image/png': 'png',
    'image/jpeg': 'jpg',
    'image/jpg': 'jpg',
    'image/gif': 'gif',
    'image/webp': 'webp',
    'image/x-icon': 'ico',
    'image/vnd.microsoft.icon': 'ico',
    'image/bmp': 'bmp',
    'image/tiff': 'tiff',
}

# Checked in order against the lowercased URL
URL_FORMAT_MARKERS = [
    ('svg', ('.svg',)),
    ('png', ('.png',)),
    ('jpg', ('.jpg', '.jpeg')),
    ('gif', ('.gif',)),
    ('webp', ('.webp',)),
    ('ico', ('.ico',)),
    ('bmp', ('.bmp',)),
    ('tiff', ('.tiff', '.tif')),
]

OPTIMIZABLE_FORMATS = ['png', 'jpg', 'jpeg', 'webp']


def is_valid_image_url(url):
    """
    Check if a URL plausibly points to an image

    Permissive on purpose: an image extension anywhere in the URL, or the
    words 'logo' or 'icon', is enough. Bad guesses fail later at download.

    Args:
        url (str): Absolute URL to check

    Returns:
        bool: True if URL is a valid image candidate
    """
    if not url:
        return False

    url_lower = url.lower()
    if any(ext in url_lower for ext in IMAGE_EXTENSIONS):
        return True
    return 'logo' in url_lower or 'icon' in url_lower


def detect_image_format(url, content_type=None):
    """
    Map a URL and an optional Content-Type header to a format tag

    The content type wins over the URL since servers often serve a
    different format than the extension suggests.

    Args:
        url (str): URL of the image
        content_type (str): Content-Type header as reported by the server

    Returns:
        str: One of svg, png, jpg, gif, webp, ico, bmp, tiff
    """
    if content_type:
        media_type = content_type.split(';', 1)[0].strip().lower()
        if media_type in CONTENT_TYPE_MAP:
            return CONTENT_TYPE_MAP[media_type]

    url_lower = (url or '').lower()
    for image_format, markers in URL_FORMAT_MARKERS:
        if any(marker in url_lower for marker in markers):
            return image_format

    return 'png'


def should_optimize(image_format):
    """Only formats Pillow round-trips reliably go through the codec"""
    return image_format in OPTIMIZABLE_FORMATS


def fit_within(width, height, max_size=MAX_DIMENSION):
    """
    Compute dimensions that fit inside a max_size square

    Args:
        width (int): Original width
        height (int): Original height
        max_size (int): Bounding box side

    Returns:
        tuple: (width, height), unchanged when already small enough
    """
    if width <= max_size and height <= max_size:
        return width, height

    scale = min(max_size / width, max_size / height)
    return max(1, round(width * scale)), max(1, round(height * scale))


def optimize_image(data, image_format):
    """
    Shrink and re-encode raster image bytes in their own format

    Args:
        data (bytes): Encoded image
        image_format (str): png, jpg, jpeg or webp

    Returns:
        bytes: Re-encoded image

    Raises:
        PIL.UnidentifiedImageError: If the bytes cannot be decoded
        OSError: If encoding fails
        ValueError: For a format this function does not encode
    """
    with Image.open(io.BytesIO(data)) as img:
        img.load()
        new_size = fit_within(img.width, img.height)
        if new_size != img.size:
            img = img.resize(new_size, Image.LANCZOS)

        output = io.BytesIO()
        if image_format == 'png':
            img.save(output, 'PNG')
        elif image_format in ('jpg', 'jpeg'):
            if img.mode not in ('RGB', 'L'):
                img = img.convert('RGB')
            img.save(output, 'JPEG', quality=JPEG_QUALITY)
        elif image_format == 'webp':
            img.save(output, 'WEBP', quality=WEBP_QUALITY)
        else:
            raise ValueError(f"Unsupported format for optimization: {image_format}")

    return output.getvalue()


def save_image(data, image_format, output_path):
    """
    Persist image bytes, normalizing raster formats when possible

    SVG, ICO, GIF, BMP and TIFF are written verbatim. PNG, JPEG and WEBP are
    resized to fit 512x512 and re-encoded; if that fails the original bytes
    are written instead.

    Args:
        data (bytes): Downloaded image bytes
        image_format (str): Detected format tag
        output_path (str): Destination file

    Returns:
        str: Path written
    """
    if should_optimize(image_format):
        try:
            data = optimize_image(data, image_format)
        except Exception as e:
            logger.debug(f"Optimization failed for {output_path}, saving original bytes: {e}")

    with open(output_path, 'wb') as f:
        f.write(data)

    return output_path
