"""AnalysisService: one build → generate → segment → attach cycle."""
from io import BytesIO

import pytest
from PIL import Image
from unittest.mock import AsyncMock, patch

from product_analyzer.constants import (
    MSG_ANALYSIS_NOT_PARSED,
    MSG_PARSE_ERROR,
    MSG_PARSE_FAILED_FULL_RESPONSE,
)
from product_analyzer.errors import ApiError, GeneralError, ImageEncodingError, ImageLoadingError
from product_analyzer.models import StagedImage
from product_analyzer.service import AnalysisService, attach_results


def _staged(color: str = "red") -> StagedImage:
    out = BytesIO()
    Image.new("RGB", (3, 3), color).save(out, format="PNG")
    return StagedImage.from_bytes(out.getvalue(), name=f"{color}.png")


def make_service(reply=None, side_effect=None) -> tuple[AnalysisService, AsyncMock]:
    vision = AsyncMock()
    vision.generate = AsyncMock(return_value=reply, side_effect=side_effect)
    return AnalysisService(vision), vision


# ── attach_results ────────────────────────────────────────────────────────────


def test_attach_results_pairs_segments_in_order():
    red, blue = _staged("red"), _staged("blue")

    analyzed = attach_results([red, blue], "image1: Red sneaker. image2: Blue sneaker.")

    assert [img.analysis_result for img in analyzed] == ["Red sneaker", "Blue sneaker"]
    assert [img.id for img in analyzed] == [red.id, blue.id]


def test_attach_results_falls_back_on_count_mismatch():
    images = [_staged(), _staged()]

    with patch("product_analyzer.service.segment_response", return_value=["only one"]):
        analyzed = attach_results(images, "raw reply")

    assert analyzed[0].analysis_result == MSG_PARSE_FAILED_FULL_RESPONSE % "raw reply"
    assert analyzed[1].analysis_result == MSG_PARSE_ERROR


# ── analyze_images ────────────────────────────────────────────────────────────


async def test_analyze_images_attaches_each_result():
    service, vision = make_service(reply="image1: A red mug. image2: A green mug.")
    images = [_staged("red"), _staged("green")]

    analyzed = await service.analyze_images(images, "What are these?")

    vision.generate.assert_awaited_once()
    request = vision.generate.call_args.args[0]
    assert request.image_count == 2
    assert request.prompt.startswith("What are these?")
    assert [img.analysis_result for img in analyzed] == ["A red mug", "A green mug"]
    assert all(img.analysis_result is None for img in images)


async def test_analyze_images_unlabelled_reply_goes_to_first_image():
    service, _ = make_service(reply="Both are mugs.")

    analyzed = await service.analyze_images([_staged(), _staged()], "q")

    assert analyzed[0].analysis_result == "Both are mugs."
    assert analyzed[1].analysis_result == MSG_ANALYSIS_NOT_PARSED


@pytest.mark.parametrize("reply", [None, ""])
async def test_analyze_images_without_text_is_api_error(reply):
    service, _ = make_service(reply=reply)

    with pytest.raises(ApiError, match="No text content in API response."):
        await service.analyze_images([_staged()], "q")


async def test_analyze_images_passes_api_error_through():
    service, _ = make_service(side_effect=ApiError("Quota exceeded"))

    with pytest.raises(ApiError) as exc_info:
        await service.analyze_images([_staged()], "q")

    assert str(exc_info.value) == "API Error: Quota exceeded"


async def test_analyze_images_encoding_failure_is_image_error():
    service, vision = make_service(reply="unused")
    broken = StagedImage(data=b"not-an-image")

    with pytest.raises(ImageLoadingError) as exc_info:
        await service.analyze_images([broken], "q")

    assert isinstance(exc_info.value, ImageEncodingError)
    vision.generate.assert_not_awaited()


async def test_analyze_images_wraps_unexpected_errors():
    service, _ = make_service(side_effect=RuntimeError("socket closed"))

    with pytest.raises(GeneralError) as exc_info:
        await service.analyze_images([_staged()], "q")

    assert str(exc_info.value) == "Error: An unexpected error occurred: socket closed"
