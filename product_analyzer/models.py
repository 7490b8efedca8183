from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from io import BytesIO
from typing import Optional, Union
import logging
import uuid

from PIL import Image

from product_analyzer.constants import MSG_ERR_DECODE, PNG_MIME_TYPE
from product_analyzer.errors import ImageLoadingError

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class StagedImage:
    data: bytes
    bitmap: Optional[Image.Image] = field(default=None, compare=False, repr=False)
    analysis_result: Optional[str] = None
    name: Optional[str] = None
    id: str = field(default_factory=_new_id)

    @classmethod
    def from_bytes(cls, data: bytes, name: Optional[str] = None) -> "StagedImage":
        """Decode raw file bytes into a staged image. Raises ImageLoadingError if not an image."""
        try:
            bitmap = Image.open(BytesIO(data))
            bitmap.load()
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            logger.debug("Decode failed for %s: %s", name, exc)
            raise ImageLoadingError(MSG_ERR_DECODE % (name or "<unnamed>")) from exc
        return cls(data=data, bitmap=bitmap, name=name)

    @property
    def label(self) -> str:
        return self.name or self.id

    def with_result(self, result: str) -> "StagedImage":
        return replace(self, analysis_result=result)


class Sender(Enum):
    USER = "user"
    BOT = "bot"


@dataclass(frozen=True)
class ChatTurn:
    sender: Sender
    images: tuple[StagedImage, ...]
    query_text: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_new_id)

    @classmethod
    def user(cls, query: str, images: list[StagedImage]) -> "ChatTurn":
        return cls(sender=Sender.USER, images=tuple(images), query_text=query)

    @classmethod
    def bot(cls, analyzed_images: list[StagedImage]) -> "ChatTurn":
        return cls(sender=Sender.BOT, images=tuple(analyzed_images))


@dataclass(frozen=True)
class ImagePart:
    data: bytes
    mime_type: str = PNG_MIME_TYPE


@dataclass(frozen=True)
class TextPart:
    text: str


ContentPart = Union[ImagePart, TextPart]


@dataclass(frozen=True)
class AnalysisRequest:
    parts: tuple[ContentPart, ...]

    @property
    def image_parts(self) -> list[ImagePart]:
        return list(filter(lambda p: isinstance(p, ImagePart), self.parts))

    @property
    def prompt(self) -> str:
        return "\n".join(p.text for p in self.parts if isinstance(p, TextPart))

    @property
    def image_count(self) -> int:
        return len(self.image_parts)
