"""In-memory movie store and its process-wide instance."""

from __future__ import annotations

import logging
import threading

from app.core.config import Settings, get_settings
from app.models import Movie
from app.services.models import ListFilter, MoviePage
from app.services.seed import load_movies

logger = logging.getLogger(__name__)


class MovieRepository:
    """Ordered collection of movies.

    Lookups signal absence with ``None``; updates and deletes of unknown ids are
    no-ops. The lock keeps mutations from interleaving with reads when FastAPI
    serves requests from its thread pool.
    """

    def __init__(self, movies: list[Movie] | None = None) -> None:
        self._items: list[Movie] = list(movies or [])
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def create(self, movie: Movie) -> None:
        with self._lock:
            self._items.append(movie)

    def find_by_id(self, movie_id: str) -> Movie | None:
        with self._lock:
            return next((item for item in self._items if item.id == movie_id), None)

    def find_many(self, movie_filter: ListFilter | None = None) -> MoviePage:
        movie_filter = movie_filter or ListFilter()
        with self._lock:
            items = list(self._items)

        if movie_filter.search:
            needle = movie_filter.search.lower()
            items = [item for item in items if needle in item.title.lower()]

        start = (movie_filter.page - 1) * movie_filter.per_page
        end = start + movie_filter.per_page
        # Negative bounds would wrap around in Python slicing.
        page_items = items[start:end] if start >= 0 and end > 0 else []
        return MoviePage(items=page_items, total=len(items))

    def list_all(self) -> list[Movie]:
        with self._lock:
            return list(self._items)

    def update(self, movie: Movie) -> bool:
        """Replace the stored movie with the same id; False when it is gone."""

        with self._lock:
            for index, item in enumerate(self._items):
                if item.id == movie.id:
                    self._items[index] = movie
                    return True
        return False

    def delete(self, movie_id: str) -> None:
        with self._lock:
            for index, item in enumerate(self._items):
                if item.id == movie_id:
                    del self._items[index]
                    return

    def replace_all(self, movies: list[Movie]) -> None:
        with self._lock:
            self._items = list(movies)

    def clear(self) -> None:
        self.replace_all([])


repository = MovieRepository()


def init_store(settings: Settings | None = None) -> MovieRepository:
    """Seed the shared repository from the movie list file (if enabled)."""

    settings = settings or get_settings()
    if not settings.seed_movies:
        logger.info("Movie seeding disabled; starting with an empty store")
        repository.clear()
        return repository

    movies = load_movies(settings.movie_list_path, settings.producer_split_policy)
    repository.replace_all(movies)
    return repository


def get_repository() -> MovieRepository:
    """FastAPI-friendly dependency returning the shared repository."""

    return repository
