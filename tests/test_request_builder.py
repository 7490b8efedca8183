"""Request assembly: PNG image parts in order, then one text part."""
from io import BytesIO

import pytest
from PIL import Image

from product_analyzer.constants import PNG_MIME_TYPE, RESPONSE_FORMAT_INSTRUCTION
from product_analyzer.errors import ImageEncodingError, ImageLoadingError
from product_analyzer.models import ImagePart, StagedImage, TextPart
from product_analyzer.request_builder import build_request, encode_png, format_query

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _image_bytes(color: str = "red", fmt: str = "JPEG") -> bytes:
    out = BytesIO()
    Image.new("RGB", (4, 4), color).save(out, format=fmt)
    return out.getvalue()


def test_encode_png_converts_jpeg_to_png():
    image = StagedImage.from_bytes(_image_bytes(fmt="JPEG"), name="shoe.jpg")
    assert encode_png(image).startswith(PNG_SIGNATURE)


def test_encode_png_works_without_decoded_bitmap():
    image = StagedImage(data=_image_bytes(fmt="PNG"))
    assert encode_png(image).startswith(PNG_SIGNATURE)


def test_encode_png_raises_with_image_id_on_bad_bytes():
    image = StagedImage(data=b"not an image")

    with pytest.raises(ImageEncodingError) as exc_info:
        encode_png(image)

    assert exc_info.value.image_id == image.id
    assert image.id in str(exc_info.value)


def test_encoding_error_is_an_image_loading_error():
    assert issubclass(ImageEncodingError, ImageLoadingError)


def test_format_query_appends_delimiter_instruction():
    prompt = format_query("Which is cheaper?")
    assert prompt.startswith("Which is cheaper?\n\n")
    assert prompt.endswith(RESPONSE_FORMAT_INSTRUCTION)
    assert "image1:" in prompt and "image2:" in prompt


def test_build_request_orders_images_then_single_text_part():
    images = list(map(lambda c: StagedImage.from_bytes(_image_bytes(c)), ["red", "green", "blue"]))

    request = build_request(images, "Describe these")

    assert list(map(type, request.parts)) == [ImagePart, ImagePart, ImagePart, TextPart]
    assert request.image_count == 3
    assert all(p.mime_type == PNG_MIME_TYPE for p in request.image_parts)
    assert request.prompt == format_query("Describe these")


def test_build_request_preserves_image_order():
    red, blue = StagedImage.from_bytes(_image_bytes("red")), StagedImage.from_bytes(_image_bytes("blue"))

    request = build_request([red, blue], "q")

    assert request.image_parts[0].data == encode_png(red)
    assert request.image_parts[1].data == encode_png(blue)


def test_build_request_does_not_enforce_image_cap():
    images = [StagedImage.from_bytes(_image_bytes()) for _ in range(6)]
    assert build_request(images, "q").image_count == 6


def test_build_request_fails_on_first_unencodable_image():
    good = StagedImage.from_bytes(_image_bytes())
    bad = StagedImage(data=b"garbage")

    with pytest.raises(ImageEncodingError) as exc_info:
        build_request([good, bad], "q")

    assert exc_info.value.image_id == bad.id


@pytest.mark.parametrize("fmt", ["JPEG", "TIFF"])
def test_encode_png_converts_cmyk_images(fmt):
    out = BytesIO()
    Image.new("CMYK", (4, 4), (0, 255, 255, 0)).save(out, format=fmt)
    image = StagedImage.from_bytes(out.getvalue(), name=f"print.{fmt.lower()}")
    assert image.bitmap.mode == "CMYK"

    encoded = encode_png(image)

    assert encoded.startswith(PNG_SIGNATURE)
    assert Image.open(BytesIO(encoded)).mode == "RGB"


def test_encode_png_keeps_alpha_when_converting():
    out = BytesIO()
    Image.new("RGBA", (4, 4), (255, 0, 0, 128)).save(out, format="PNG")
    bitmap = Image.open(BytesIO(out.getvalue())).convert("RGBa")
    image = StagedImage(data=out.getvalue(), bitmap=bitmap)

    assert Image.open(BytesIO(encode_png(image))).mode == "RGBA"


def test_encode_png_leaves_png_modes_untouched():
    out = BytesIO()
    Image.new("L", (4, 4), 128).save(out, format="PNG")
    image = StagedImage.from_bytes(out.getvalue())

    assert Image.open(BytesIO(encode_png(image))).mode == "L"
