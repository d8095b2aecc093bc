"""FastAPI entrypoint wiring the movie store and award analytics."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field

from app.core.config import get_settings
from app.core.logging_config import configure_logging
from app.db import MovieRepository, get_repository, init_store
from app.models import Movie
from app.services import movies as movie_service
from app.services.models import DEFAULT_PAGE, DEFAULT_PER_PAGE, AwardIntervals, ListFilter, ProducerWinInterval

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Configure logging + seed the in-memory store before serving."""

    configure_logging()
    repo = init_store()
    logger.info("Movie store ready with %d movies", len(repo))
    yield


app = FastAPI(title=get_settings().app_title, lifespan=lifespan)


class MovieInput(BaseModel):
    model_config = ConfigDict(strict=True)

    year: int = Field(..., description="Year of the movie")
    title: str = Field(..., description="Title of the movie")
    studios: list[str] = Field(..., description="Studios that produced the movie")
    producers: list[str] = Field(..., description="Producers of the movie")
    winner: bool = Field(default=False, description="Indicates if the movie won an award")


class UpdateMovieInput(BaseModel):
    model_config = ConfigDict(strict=True)

    year: int | None = None
    title: str | None = None
    studios: list[str] | None = None
    producers: list[str] | None = None
    winner: bool | None = None


class MovieView(BaseModel):
    id: str
    year: int
    title: str
    studios: list[str]
    producers: list[str]
    winner: bool


class MovieWrapper(BaseModel):
    movie: MovieView


class MoviesList(BaseModel):
    items: list[MovieView]
    total: int


class ProducerIntervalView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    producer: str
    interval: int
    previous_win: int = Field(..., alias="previousWin")
    following_win: int = Field(..., alias="followingWin")


class AwardIntervalsView(BaseModel):
    min: list[ProducerIntervalView]
    max: list[ProducerIntervalView]


@app.post("/movies", response_model=MovieWrapper, status_code=status.HTTP_201_CREATED)
def create_movie(
    payload: MovieInput,
    repo: MovieRepository = Depends(get_repository),
) -> MovieWrapper:
    try:
        movie = movie_service.create_movie(repo, payload.model_dump())
    except movie_service.MovieServiceError as exc:
        raise _http_error(exc) from exc
    return MovieWrapper(movie=_movie_to_view(movie))


@app.get("/movies", response_model=MoviesList)
def list_movies(
    search: str | None = Query(default=None, description="Search term matched against titles"),
    page: int = Query(default=DEFAULT_PAGE, ge=1),
    per_page: int = Query(default=DEFAULT_PER_PAGE, ge=1, alias="perPage"),
    repo: MovieRepository = Depends(get_repository),
) -> MoviesList:
    try:
        result = movie_service.list_movies(
            repo, ListFilter(search=search, page=page, per_page=per_page)
        )
    except movie_service.MovieServiceError as exc:
        raise _http_error(exc) from exc
    return MoviesList(items=[_movie_to_view(movie) for movie in result.items], total=result.total)


@app.get(
    "/movies/analytics/producers-award-intervals",
    response_model=AwardIntervalsView,
)
def get_producers_award_intervals(
    repo: MovieRepository = Depends(get_repository),
) -> AwardIntervalsView:
    """Producers with the shortest and longest gaps between consecutive wins."""

    try:
        result = movie_service.get_award_intervals(repo)
    except movie_service.MovieServiceError as exc:
        raise _http_error(exc) from exc
    return _intervals_to_view(result)


@app.get("/movies/{movie_id}", response_model=MovieWrapper)
def get_movie(
    movie_id: str,
    repo: MovieRepository = Depends(get_repository),
) -> MovieWrapper:
    try:
        movie = movie_service.get_movie(repo, movie_id)
    except movie_service.MovieServiceError as exc:
        raise _http_error(exc) from exc
    return MovieWrapper(movie=_movie_to_view(movie))


@app.put("/movies/{movie_id}", response_model=MovieWrapper)
def update_movie(
    movie_id: str,
    payload: UpdateMovieInput,
    repo: MovieRepository = Depends(get_repository),
) -> MovieWrapper:
    try:
        movie = movie_service.update_movie(repo, movie_id, payload.model_dump(exclude_unset=True))
    except movie_service.MovieServiceError as exc:
        raise _http_error(exc) from exc
    return MovieWrapper(movie=_movie_to_view(movie))


@app.delete("/movies/{movie_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_movie(
    movie_id: str,
    repo: MovieRepository = Depends(get_repository),
) -> Response:
    try:
        movie_service.delete_movie(repo, movie_id)
    except movie_service.MovieServiceError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _http_error(exc: movie_service.MovieServiceError) -> HTTPException:
    if isinstance(exc, movie_service.MovieNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, movie_service.MovieValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.errors)
    logger.error("Movie operation failed: %s", exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal error while processing movies.",
    )


def _movie_to_view(movie: Movie) -> MovieView:
    return MovieView(
        id=movie.id,
        year=movie.year,
        title=movie.title,
        studios=list(movie.studios),
        producers=list(movie.producers),
        winner=movie.winner,
    )


def _interval_to_view(item: ProducerWinInterval) -> ProducerIntervalView:
    return ProducerIntervalView(
        producer=item.producer,
        interval=item.interval,
        previous_win=item.previous_win,
        following_win=item.following_win,
    )


def _intervals_to_view(result: AwardIntervals) -> AwardIntervalsView:
    return AwardIntervalsView(
        min=[_interval_to_view(item) for item in result.min],
        max=[_interval_to_view(item) for item in result.max],
    )
