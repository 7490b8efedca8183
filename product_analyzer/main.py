"""Entry point — wires Config → VisionClient → AnalysisService → ChatSession."""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from product_analyzer import constants
from product_analyzer.config import Config
from product_analyzer.errors import AppError
from product_analyzer.models import ChatTurn, StagedImage
from product_analyzer.service import AnalysisService
from product_analyzer.session import ChatSession
from product_analyzer.vision.claude import ClaudeVisionClient
from product_analyzer.vision.client import VisionClient
from product_analyzer.vision.gemini import GeminiVisionClient
from product_analyzer.vision.openai import OpenAIVisionClient

logger = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def create_vision_client(config: Config) -> VisionClient:
    match config.vision_provider:
        case constants.PROVIDER_CLAUDE:
            return ClaudeVisionClient(config.api_key, config.vision_model, config.max_tokens)
        case constants.PROVIDER_OPENAI:
            return OpenAIVisionClient(config.api_key, config.vision_model, config.max_tokens)
        case _:
            return GeminiVisionClient(config.api_key, config.vision_model)


def load_images(paths: list[Path]) -> list[StagedImage]:
    """Read and decode image files. Raises ImageLoadingError on the first bad file."""
    return list(map(lambda p: StagedImage.from_bytes(p.read_bytes(), name=p.name), paths))


def render_turn(console: Console, turn: ChatTurn) -> None:
    list(map(
        lambda img: console.print(f"[bold]{escape(img.label)}[/bold]\n{escape(img.analysis_result or '')}\n"),
        turn.images,
    ))


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="product-analyzer",
        description="Analyze up to four product images with a hosted vision model.",
    )
    parser.add_argument("images", nargs="+", type=Path, help="image files to analyze")
    parser.add_argument("-q", "--query", required=True, help="question to ask about the images")
    return parser.parse_args(argv)


async def run(session: ChatSession, images: list[StagedImage], query: str) -> ChatTurn | None:
    session.stage_images(images)
    session.user_query = query
    match session.submit_query():
        case None:
            return None
        case task:
            return await task


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    config = Config.from_env()
    _setup_logging(config.log_level)
    console = Console()
    logger.info(constants.MSG_STARTING, config.vision_provider, config.vision_model)

    session = ChatSession(AnalysisService(create_vision_client(config)))
    try:
        images = load_images(args.images)
    except (AppError, OSError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return 1

    turn = asyncio.run(run(session, images, args.query))
    match turn:
        case None:
            console.print(f"[red]{escape(session.error_message or '')}[/red]")
            return 1
        case _:
            render_turn(console, turn)
            return 0


if __name__ == "__main__":
    sys.exit(main())
