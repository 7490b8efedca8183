"""VisionClient — abstract base for multimodal analysis backends."""
from abc import ABC, abstractmethod

from product_analyzer.errors import ApiError
from product_analyzer.models import AnalysisRequest


class VisionClient(ABC):
    @abstractmethod
    async def generate(self, request: AnalysisRequest) -> str | None:
        """Send one multimodal request and return the reply text, or None when
        the reply carries no text. Raises ApiError on provider failures."""
        ...


def api_error_from(exc: Exception) -> ApiError:
    """Wrap an SDK exception, preferring its provider diagnostic message."""
    match getattr(exc, "message", None):
        case str() as detail if detail:
            return ApiError(detail)
        case _:
            return ApiError(str(exc) or type(exc).__name__)
