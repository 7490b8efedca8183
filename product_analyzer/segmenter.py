"""Splits one free-text model reply into per-image results using ``imageK:`` markers.

The model is asked (see ``request_builder.format_query``) to prefix each
image's answer with ``image1:``, ``image2:`` and so on. Nothing forces it to,
so the split is best-effort:

* no marker at all → the whole reply goes to the first image;
* a missing marker → that slot keeps the "not available" sentinel;
* markers are matched case-insensitively, in index order, and the search
  only ever moves forward (first match wins).

The result always has exactly ``image_count`` entries.
"""
import logging
import re
from functools import reduce

from product_analyzer.constants import (
    DELIMITER_TEMPLATE,
    MSG_ANALYSIS_NOT_AVAILABLE,
    MSG_ANALYSIS_NOT_PARSED,
)

logger = logging.getLogger(__name__)

# (search cursor, results so far)
_State = tuple[int, tuple[str, ...]]


# ── pure helpers ──────────────────────────────────────────────────────────────


def _delimiter(index: int) -> re.Pattern[str]:
    return re.compile(re.escape(DELIMITER_TEMPLATE.format(index=index)), re.IGNORECASE)


def _has_delimiters(text: str, image_count: int) -> bool:
    return any(_delimiter(i).search(text) for i in range(1, image_count + 1))


def _clean(fragment: str) -> str:
    stripped = fragment.strip()
    match stripped.endswith("."):
        case True:
            return stripped[:-1]
        case False:
            return stripped


def _slot_end(text: str, index: int, start: int, image_count: int) -> int:
    match index < image_count:
        case True:
            following = _delimiter(index + 1).search(text, start)
            return following.start() if following else len(text)
        case False:
            return len(text)


def _fill_slot(text: str, image_count: int, state: _State, index: int) -> _State:
    cursor, results = state
    match _delimiter(index).search(text, cursor):
        case None:
            logger.debug("Parser: no delimiter for image %d", index)
            return cursor, results + (MSG_ANALYSIS_NOT_AVAILABLE,)
        case found:
            start = found.end()
            end = _slot_end(text, index, start, image_count)
            extracted = _clean(text[start:end])
            logger.debug("Parser: image %d → %r", index, extracted)
            return end, results + (extracted,)


def _unlabelled(text: str, image_count: int) -> list[str]:
    match text:
        case "":
            return [MSG_ANALYSIS_NOT_AVAILABLE] * image_count
        case _:
            logger.debug("Parser: no image delimiters, assigning full reply to first image")
            return [text.strip()] + [MSG_ANALYSIS_NOT_PARSED] * (image_count - 1)


# ── public API ────────────────────────────────────────────────────────────────


def segment_response(text: str, image_count: int) -> list[str]:
    """Return exactly ``image_count`` analysis strings for ``text``."""
    match image_count:
        case n if n <= 0:
            return []
        case _:
            pass

    match _has_delimiters(text, image_count):
        case False:
            return _unlabelled(text, image_count)
        case True:
            _, results = reduce(
                lambda state, i: _fill_slot(text, image_count, state, i),
                range(1, image_count + 1),
                (0, ()),
            )
            return list(results)
