"""Movie use cases sitting between the HTTP layer and the in-memory store."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from app.db import MovieRepository
from app.models import Movie
from app.services.awards import compute_award_intervals
from app.services.models import AwardIntervals, ListFilter, MoviePage

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "year", "studios", "producers", "winner")


class MovieServiceError(Exception):
    """Base exception for movie use-case failures."""


class MovieNotFound(MovieServiceError):
    """Raised when no movie exists for the given id."""

    def __init__(self, movie_id: str) -> None:
        self.movie_id = movie_id
        super().__init__(f"Movie with id {movie_id} not found")


class MovieValidationError(MovieServiceError):
    """Raised when movie data fails entity validation."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        super().__init__(f"Invalid movie data: {errors}")


class MovieStoreError(MovieServiceError):
    """Raised when the store fails unexpectedly."""


def _build_movie(data: Mapping[str, Any]) -> Movie:
    try:
        return Movie.model_validate(dict(data))
    except ValidationError as exc:
        raise MovieValidationError(
            exc.errors(include_url=False, include_context=False, include_input=False)
        ) from exc


def _find_existing(repo: MovieRepository, movie_id: str, action: str) -> Movie:
    try:
        movie = repo.find_by_id(movie_id)
    except Exception as exc:
        logger.exception("%s: error retrieving movie %s", action, movie_id)
        raise MovieStoreError(f"{action}: error retrieving movie {movie_id}: {exc}") from exc
    if movie is None:
        raise MovieNotFound(movie_id)
    return movie


def create_movie(repo: MovieRepository, data: Mapping[str, Any]) -> Movie:
    movie = _build_movie({key: value for key, value in data.items() if key != "id"})
    try:
        repo.create(movie)
    except Exception as exc:
        logger.exception("create_movie: error storing movie")
        raise MovieStoreError(f"create_movie: error storing movie: {exc}") from exc
    logger.info("Created movie %s (%s)", movie.id, movie.title)
    return movie


def get_movie(repo: MovieRepository, movie_id: str) -> Movie:
    return _find_existing(repo, movie_id, "get_movie")


def list_movies(repo: MovieRepository, movie_filter: ListFilter | None = None) -> MoviePage:
    try:
        return repo.find_many(movie_filter or ListFilter())
    except Exception as exc:
        logger.exception("list_movies: error retrieving movies")
        raise MovieStoreError(f"list_movies: error retrieving movies: {exc}") from exc


def update_movie(repo: MovieRepository, movie_id: str, changes: Mapping[str, Any]) -> Movie:
    """Apply the provided fields to a stored movie.

    Fields that are missing or ``None`` keep their current value. The merged
    record is validated as a whole before it replaces the stored one, so a
    rejected update leaves the movie untouched.
    """

    current = _find_existing(repo, movie_id, "update_movie")
    provided = {
        key: value
        for key, value in changes.items()
        if key in UPDATABLE_FIELDS and value is not None
    }
    updated = _build_movie({**current.model_dump(), **provided, "id": current.id})
    try:
        replaced = repo.update(updated)
    except Exception as exc:
        logger.exception("update_movie: error updating movie %s", movie_id)
        raise MovieStoreError(f"update_movie: error updating movie {movie_id}: {exc}") from exc
    if not replaced:
        raise MovieNotFound(movie_id)
    logger.info("Updated movie %s fields=%s", movie_id, sorted(provided))
    return updated


def delete_movie(repo: MovieRepository, movie_id: str) -> None:
    _find_existing(repo, movie_id, "delete_movie")
    try:
        repo.delete(movie_id)
    except Exception as exc:
        logger.exception("delete_movie: error deleting movie %s", movie_id)
        raise MovieStoreError(f"delete_movie: error deleting movie {movie_id}: {exc}") from exc
    logger.info("Deleted movie %s", movie_id)


def get_award_intervals(repo: MovieRepository) -> AwardIntervals:
    try:
        movies = repo.list_all()
    except Exception as exc:
        logger.exception("get_award_intervals: error retrieving movies")
        raise MovieStoreError(f"get_award_intervals: error retrieving movies: {exc}") from exc
    return compute_award_intervals(movies)
