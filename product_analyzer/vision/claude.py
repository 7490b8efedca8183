"""ClaudeVisionClient — Anthropic Claude vision backend."""
import base64
import logging

import anthropic
from anthropic import AsyncAnthropic

from product_analyzer.constants import DEFAULT_MAX_TOKENS, DEFAULT_VISION_MODELS, PROVIDER_CLAUDE
from product_analyzer.models import AnalysisRequest, ImagePart
from product_analyzer.vision.client import VisionClient, api_error_from

logger = logging.getLogger(__name__)


def _image_block(part: ImagePart) -> dict:
    return {
        "type": "image",
        "source": {
            "type": "base64",
            "media_type": part.mime_type,
            "data": base64.standard_b64encode(part.data).decode(),
        },
    }


class ClaudeVisionClient(VisionClient):

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_VISION_MODELS[PROVIDER_CLAUDE],
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens

    async def generate(self, request: AnalysisRequest) -> str | None:
        client = AsyncAnthropic(api_key=self._api_key)
        content = [
            *map(_image_block, request.image_parts),
            {"type": "text", "text": request.prompt},
        ]
        try:
            message = await client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.APIError as exc:
            logger.error("Anthropic error: %r", exc)
            raise api_error_from(exc) from exc
        text = "".join(b.text for b in message.content if getattr(b, "type", None) == "text")
        return text or None
