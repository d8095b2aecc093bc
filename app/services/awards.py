"""Producer award interval analytics."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from app.models import Movie
from app.services.models import AwardIntervals, ProducerWinInterval


def group_wins_by_producer(movies: Iterable[Movie]) -> dict[str, list[int]]:
    """Map each trimmed producer name to the years of the winning movies it is credited on.

    Producers keep the order in which they first appear; repeated years are kept.
    """

    wins: dict[str, list[int]] = defaultdict(list)
    for movie in movies:
        if not movie.winner:
            continue
        for producer in movie.producers:
            wins[producer.strip()].append(movie.year)
    return dict(wins)


def consecutive_intervals(producer: str, years: Iterable[int]) -> list[ProducerWinInterval]:
    """One interval per adjacent pair of the producer's sorted win years."""

    ordered = sorted(years)
    return [
        ProducerWinInterval(
            producer=producer,
            interval=following - previous,
            previous_win=previous,
            following_win=following,
        )
        for previous, following in zip(ordered, ordered[1:])
    ]


def compute_award_intervals(movies: Iterable[Movie]) -> AwardIntervals:
    """Return every interval tied for the shortest and for the longest gap between wins.

    Every adjacent pair of a producer's wins is a candidate on its own, so a
    producer with three wins can appear in both cohorts. Producers with a
    single win contribute nothing.
    """

    wins = group_wins_by_producer(movies)
    if not wins:
        return AwardIntervals(min=[], max=[])

    candidates: list[ProducerWinInterval] = []
    for producer, years in wins.items():
        if len(years) < 2:
            continue
        candidates.extend(consecutive_intervals(producer, years))

    if not candidates:
        return AwardIntervals(min=[], max=[])

    shortest = min(candidate.interval for candidate in candidates)
    longest = max(candidate.interval for candidate in candidates)
    return AwardIntervals(
        min=[candidate for candidate in candidates if candidate.interval == shortest],
        max=[candidate for candidate in candidates if candidate.interval == longest],
    )
