"""OpenAIVisionClient — OpenAI GPT-4o vision backend."""
import base64
import logging

import openai
from openai import AsyncOpenAI

from product_analyzer.constants import DEFAULT_MAX_TOKENS, DEFAULT_VISION_MODELS, PROVIDER_OPENAI
from product_analyzer.models import AnalysisRequest, ImagePart
from product_analyzer.vision.client import VisionClient, api_error_from

logger = logging.getLogger(__name__)


def _image_block(part: ImagePart) -> dict:
    image_data = base64.standard_b64encode(part.data).decode()
    return {
        "type": "image_url",
        "image_url": {"url": f"data:{part.mime_type};base64,{image_data}"},
    }


class OpenAIVisionClient(VisionClient):

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_VISION_MODELS[PROVIDER_OPENAI],
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens

    async def generate(self, request: AnalysisRequest) -> str | None:
        client = AsyncOpenAI(api_key=self._api_key)
        content = [
            *map(_image_block, request.image_parts),
            {"type": "text", "text": request.prompt},
        ]
        try:
            response = await client.chat.completions.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=[{"role": "user", "content": content}],
            )
        except openai.APIError as exc:
            logger.error("OpenAI error: %r", exc)
            raise api_error_from(exc) from exc
        return response.choices[0].message.content or None
