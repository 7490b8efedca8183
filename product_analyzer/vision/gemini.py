"""GeminiVisionClient — Google Gemini multimodal backend."""
import logging

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from product_analyzer.constants import DEFAULT_VISION_MODELS, PROVIDER_GEMINI
from product_analyzer.models import AnalysisRequest
from product_analyzer.vision.client import VisionClient, api_error_from

logger = logging.getLogger(__name__)


def _response_text(response) -> str | None:
    # .text raises ValueError when the candidate has no text parts
    try:
        return response.text
    except ValueError as exc:
        logger.warning("Gemini reply has no text: %s", exc)
        return None


class GeminiVisionClient(VisionClient):

    def __init__(self, api_key: str, model: str = DEFAULT_VISION_MODELS[PROVIDER_GEMINI]) -> None:
        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(model)

    async def generate(self, request: AnalysisRequest) -> str | None:
        contents = [
            *map(lambda p: {"mime_type": p.mime_type, "data": p.data}, request.image_parts),
            request.prompt,
        ]
        try:
            response = await self._model.generate_content_async(contents)
        except google_exceptions.GoogleAPIError as exc:
            logger.error("Gemini error: %r", exc)
            raise api_error_from(exc) from exc
        return _response_text(response)
