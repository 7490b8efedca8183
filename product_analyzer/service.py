"""AnalysisService — one request/response cycle: build → generate → segment → attach."""
import logging
import time

from product_analyzer.constants import (
    MSG_ANALYSIS_DONE,
    MSG_COUNT_MISMATCH,
    MSG_ERR_NO_TEXT,
    MSG_ERR_UNEXPECTED,
    MSG_PARSE_ERROR,
    MSG_PARSE_FAILED_FULL_RESPONSE,
    MSG_SUBMITTING,
)
from product_analyzer.errors import ApiError, AppError, GeneralError
from product_analyzer.models import StagedImage
from product_analyzer.request_builder import build_request
from product_analyzer.segmenter import segment_response
from product_analyzer.vision.client import VisionClient

logger = logging.getLogger(__name__)


def attach_results(images: list[StagedImage], text: str) -> list[StagedImage]:
    """Pair each image with its segment of ``text``, degrading to the full reply on a count mismatch."""
    analyses = segment_response(text, len(images))
    match len(analyses) == len(images):
        case True:
            return list(map(lambda pair: pair[0].with_result(pair[1]), zip(images, analyses)))
        case False:
            logger.warning(MSG_COUNT_MISMATCH, len(images), len(analyses))
            fallback = [MSG_PARSE_FAILED_FULL_RESPONSE % text] + [MSG_PARSE_ERROR] * (len(images) - 1)
            return list(map(lambda pair: pair[0].with_result(pair[1]), zip(images, fallback)))


class AnalysisService:
    """Analyzes staged images against a query through a VisionClient backend."""

    def __init__(self, vision_client: VisionClient) -> None:
        self._vision_client = vision_client

    async def analyze_images(self, images: list[StagedImage], query: str) -> list[StagedImage]:
        """Return copies of ``images`` with their analysis attached, in order.

        Raises ImageLoadingError, ApiError or GeneralError; nothing is retried.
        """
        started = time.monotonic()
        logger.info(MSG_SUBMITTING, len(images))
        try:
            request = build_request(images, query)
            text = await self._vision_client.generate(request)
        except AppError:
            raise
        except Exception as exc:
            logger.error("Unexpected analysis failure: %s", exc, exc_info=True)
            raise GeneralError(MSG_ERR_UNEXPECTED % exc) from exc

        match text:
            case None | "":
                raise ApiError(MSG_ERR_NO_TEXT)
            case reply:
                analyzed = attach_results(images, reply)
                logger.info(MSG_ANALYSIS_DONE, time.monotonic() - started)
                return analyzed
