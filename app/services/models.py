"""Shared dataclasses for service layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from app.models import Movie

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10


@dataclass(slots=True)
class ListFilter:
    """Search and pagination options for listing movies."""

    search: str | None = None
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE


@dataclass(slots=True)
class MoviePage:
    items: list[Movie]
    total: int


@dataclass(slots=True, frozen=True)
class ProducerWinInterval:
    """Gap between two consecutive wins of the same producer."""

    producer: str
    interval: int
    previous_win: int
    following_win: int


@dataclass(slots=True)
class AwardIntervals:
    min: list[ProducerWinInterval] = field(default_factory=list)
    max: list[ProducerWinInterval] = field(default_factory=list)
