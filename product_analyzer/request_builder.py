"""Builds the provider-agnostic multimodal request: PNG image parts, then one text part."""
from io import BytesIO
import logging

from PIL import Image

from product_analyzer.constants import PNG_FORMAT, PNG_MODES, RESPONSE_FORMAT_INSTRUCTION
from product_analyzer.errors import ImageEncodingError
from product_analyzer.models import AnalysisRequest, ImagePart, StagedImage, TextPart

logger = logging.getLogger(__name__)


def _png_compatible(bitmap: Image.Image) -> Image.Image:
    match bitmap.mode in PNG_MODES:
        case True:
            return bitmap
        case False:
            has_alpha = bool({"A", "a"} & set(bitmap.getbands()))
            return bitmap.convert("RGBA" if has_alpha else "RGB")


def encode_png(image: StagedImage) -> bytes:
    """Re-encode a staged image as PNG. Raises ImageEncodingError naming the image."""
    try:
        bitmap = image.bitmap if image.bitmap is not None else Image.open(BytesIO(image.data))
        out = BytesIO()
        _png_compatible(bitmap).save(out, format=PNG_FORMAT)
        return out.getvalue()
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        logger.error("PNG encoding failed for %s: %s", image.label, exc)
        raise ImageEncodingError(image.id) from exc


def format_query(query: str) -> str:
    return f"{query}\n\n{RESPONSE_FORMAT_INSTRUCTION}"


def build_request(images: list[StagedImage], query: str) -> AnalysisRequest:
    image_parts = list(map(lambda img: ImagePart(data=encode_png(img)), images))
    return AnalysisRequest(parts=(*image_parts, TextPart(format_query(query))))
