"""ChatSession — headless chat state: staging, history, busy flag, last error.

State is only touched on the event loop; the analysis task hands its result
back through its own completion, never from another thread.
"""
import asyncio
import logging
from typing import Iterable, Optional

from product_analyzer.constants import (
    MAX_STAGED_IMAGES,
    MSG_ANALYSIS_FAILED,
    MSG_ERR_BUSY,
    MSG_ERR_NO_IMAGES,
    MSG_ERR_NO_QUERY,
    MSG_STAGING_FULL,
)
from product_analyzer.errors import AppError
from product_analyzer.models import ChatTurn, StagedImage
from product_analyzer.service import AnalysisService

logger = logging.getLogger(__name__)


class ChatSession:

    def __init__(self, service: AnalysisService, max_staged: int = MAX_STAGED_IMAGES) -> None:
        self._service = service
        self._max_staged = max_staged
        self._task: Optional[asyncio.Task] = None
        self.staged_images: list[StagedImage] = []
        self.user_query: str = ""
        self.chat_turns: list[ChatTurn] = []
        self.is_loading: bool = False
        self.error_message: Optional[str] = None

    # ── staging ───────────────────────────────────────────────────────────────

    def stage_images(self, images: list[StagedImage]) -> int:
        """Stage as many images as the cap allows; returns how many were accepted."""
        free = max(self._max_staged - len(self.staged_images), 0)
        accepted = images[:free]
        self.staged_images.extend(accepted)
        match len(images) - len(accepted):
            case 0:
                pass
            case dropped:
                logger.info(MSG_STAGING_FULL, dropped)
        return len(accepted)

    def remove_staged_image(self, image_id: str) -> None:
        self.staged_images = list(filter(lambda img: img.id != image_id, self.staged_images))

    def remove_staged_at(self, indices: Iterable[int]) -> None:
        doomed = set(indices)
        self.staged_images = [
            img for i, img in enumerate(self.staged_images) if i not in doomed
        ]

    # ── submission ────────────────────────────────────────────────────────────

    def _validation_error(self) -> Optional[str]:
        match (self.is_loading, self.staged_images, self.user_query.strip()):
            case (True, _, _):
                return MSG_ERR_BUSY
            case (_, [], _):
                return MSG_ERR_NO_IMAGES
            case (_, _, ""):
                return MSG_ERR_NO_QUERY
            case _:
                return None

    def submit_query(self) -> Optional[asyncio.Task]:
        """Start analyzing the staged images. Returns the pending task, or None if rejected.

        The task resolves to the bot turn on success, or None after recording
        ``error_message``. Must be called from inside a running event loop.
        """
        match self._validation_error():
            case str() as problem:
                self.error_message = problem
                return None
            case None:
                pass

        self.is_loading = True
        self.error_message = None

        images, query = list(self.staged_images), self.user_query
        self.chat_turns.append(ChatTurn.user(query, images))
        self.staged_images = []
        self.user_query = ""

        self._task = asyncio.create_task(self._run_analysis(images, query))
        return self._task

    async def _run_analysis(self, images: list[StagedImage], query: str) -> Optional[ChatTurn]:
        try:
            analyzed = await self._service.analyze_images(images, query)
        except AppError as exc:
            logger.error(MSG_ANALYSIS_FAILED, exc)
            self.error_message = str(exc)
            return None
        finally:
            self.is_loading = False

        turn = ChatTurn.bot(analyzed)
        self.chat_turns.append(turn)
        return turn
