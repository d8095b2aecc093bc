"""Parse the semicolon-delimited movie list used to seed the store.

Each data line reads ``year;title;studios;producers;winner``. The first line of
the file is a header. ``studios`` and ``producers`` are comma separated; with
the ``comma_and`` policy producer credits such as ``"A, B and C"`` are also
split on the word ``and``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from app.core.config import ProducerSplitPolicy
from app.models import Movie

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ";"
LIST_SEPARATOR = ","
AND_SEPARATOR = " and "


def split_studios(raw: str) -> list[str]:
    return [chunk.strip() for chunk in raw.split(LIST_SEPARATOR) if chunk.strip()]


def split_producers(raw: str, policy: ProducerSplitPolicy = "comma_and") -> list[str]:
    chunks = raw.split(LIST_SEPARATOR)
    if policy == "comma_and":
        chunks = [part for chunk in chunks for part in chunk.split(AND_SEPARATOR)]
    return [chunk.strip() for chunk in chunks if chunk.strip()]


def parse_winner(raw: str | None) -> bool:
    return bool(raw) and raw.strip().lower() == "yes"


def parse_movie_line(line: str, policy: ProducerSplitPolicy = "comma_and") -> Movie | None:
    """Build a Movie from one data line, or return None when the line is malformed."""

    fields = line.rstrip("\r\n").split(FIELD_SEPARATOR)
    fields += [""] * (5 - len(fields))
    raw_year, raw_title, raw_studios, raw_producers, raw_winner = (
        value.strip() for value in fields[:5]
    )
    if not (raw_year and raw_title and raw_studios and raw_producers):
        return None
    try:
        year = int(raw_year)
    except ValueError:
        logger.debug("Skipping movie line with invalid year: %r", line)
        return None
    try:
        return Movie(
            year=year,
            title=raw_title,
            studios=split_studios(raw_studios),
            producers=split_producers(raw_producers, policy),
            winner=parse_winner(raw_winner),
        )
    except ValidationError as exc:
        logger.debug("Skipping invalid movie line %r: %s", line, exc)
        return None


def load_movies(path: Path, policy: ProducerSplitPolicy = "comma_and") -> list[Movie]:
    """Read every valid movie from the list file.

    A missing or unreadable file yields an empty list so the service can still start.
    """

    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read movie list %s, starting empty: %s", path, exc)
        return []

    lines = content.strip().splitlines()[1:]
    movies: list[Movie] = []
    skipped = 0
    for line in lines:
        movie = parse_movie_line(line, policy)
        if movie is None:
            skipped += 1
            continue
        movies.append(movie)

    logger.info("Loaded %d movies from %s (%d lines skipped)", len(movies), path, skipped)
    return movies
