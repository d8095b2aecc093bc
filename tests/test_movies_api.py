import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.db import MovieRepository, get_repository, repository
from app.main import app
from app.models import Movie
from app.services import movies as movie_service


@pytest.fixture
def repo():
    return MovieRepository(
        [
            Movie(title="Hudson Hawk", year=1991, studios=["TriStar Pictures"], producers=["Joel Silver"], winner=True),
            Movie(
                title="The Adventures of Ford Fairlane",
                year=1990,
                studios=["20th Century Fox"],
                producers=["Steven Perry", "Joel Silver"],
                winner=True,
            ),
            Movie(title="Swept Away", year=2002, studios=["Screen Gems"], producers=["Matthew Vaughn"], winner=True),
            Movie(title="Fantastic Four", year=2015, studios=["20th Century Fox"], producers=["Matthew Vaughn"], winner=True),
            Movie(title="Cruising", year=1980, studios=["United Artists"], producers=["Jerry Weintraub"]),
        ]
    )


@pytest.fixture
def client(repo):
    app.dependency_overrides[get_repository] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def payload():
    return {
        "year": 2003,
        "title": "Gigli",
        "studios": ["Columbia Pictures", "Revolution Studios"],
        "producers": ["Martin Brest", "Casey Silver"],
        "winner": True,
    }


def test_create_movie_returns_created_record(client, repo, payload):
    response = client.post("/movies", json=payload)
    assert response.status_code == 201
    movie = response.json()["movie"]
    assert movie["id"]
    assert {key: movie[key] for key in payload} == payload
    assert repo.find_by_id(movie["id"]) is not None


def test_create_movie_defaults_winner(client):
    response = client.post(
        "/movies",
        json={"year": 2004, "title": "Catwoman", "studios": ["Warner Bros."], "producers": ["Denise Di Novi"]},
    )
    assert response.status_code == 201
    assert response.json()["movie"]["winner"] is False


def test_create_movie_rejects_invalid_entities(client, repo):
    response = client.post(
        "/movies", json={"year": 2004, "title": "", "studios": [], "producers": ["Someone"]}
    )
    assert response.status_code == 400
    assert len(repo) == 5


def test_create_movie_rejects_malformed_body(client):
    response = client.post("/movies", json={"year": "soon", "title": "Catwoman"})
    assert response.status_code == 422


def test_get_movie_round_trip_and_delete(client, payload):
    created = client.post("/movies", json=payload).json()["movie"]

    fetched = client.get(f"/movies/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == {"movie": created}

    deleted = client.delete(f"/movies/{created['id']}")
    assert deleted.status_code == 204

    assert client.get(f"/movies/{created['id']}").status_code == 404
    assert client.delete(f"/movies/{created['id']}").status_code == 404


def test_get_movie_not_found(client):
    response = client.get("/movies/does-not-exist")
    assert response.status_code == 404
    assert "does-not-exist" in response.json()["detail"]


def test_list_movies_paginates(client):
    response = client.get("/movies", params={"page": 2, "perPage": 2})
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 5
    assert [movie["title"] for movie in body["items"]] == ["Swept Away", "Fantastic Four"]

    beyond = client.get("/movies", params={"page": 9, "perPage": 2}).json()
    assert beyond == {"items": [], "total": 5}


def test_list_movies_searches_titles(client):
    body = client.get("/movies", params={"search": "HAWK"}).json()
    assert body["total"] == 1
    assert body["items"][0]["title"] == "Hudson Hawk"


def test_list_movies_rejects_invalid_page(client):
    assert client.get("/movies", params={"page": 0}).status_code == 422
    assert client.get("/movies", params={"perPage": 0}).status_code == 422


def test_update_movie_applies_only_provided_fields(client, repo):
    target = repo.list_all()[4]
    response = client.put(f"/movies/{target.id}", json={"winner": True, "title": None})
    assert response.status_code == 200
    movie = response.json()["movie"]
    assert movie == {
        "id": target.id,
        "year": 1980,
        "title": "Cruising",
        "studios": ["United Artists"],
        "producers": ["Jerry Weintraub"],
        "winner": True,
    }
    assert repo.find_by_id(target.id).winner is True


def test_update_movie_invalid_change_leaves_record_untouched(client, repo):
    target = repo.list_all()[0]
    response = client.put(f"/movies/{target.id}", json={"title": "Renamed", "producers": []})
    assert response.status_code == 400
    assert repo.find_by_id(target.id).title == "Hudson Hawk"


def test_update_movie_not_found(client):
    assert client.put("/movies/missing", json={"title": "Nope"}).status_code == 404


def test_award_intervals_endpoint(client):
    response = client.get("/movies/analytics/producers-award-intervals")
    assert response.status_code == 200
    assert response.json() == {
        "min": [{"producer": "Joel Silver", "interval": 1, "previousWin": 1990, "followingWin": 1991}],
        "max": [{"producer": "Matthew Vaughn", "interval": 13, "previousWin": 2002, "followingWin": 2015}],
    }


def test_award_intervals_reflect_updates(client, repo):
    target = next(movie for movie in repo.list_all() if movie.title == "Swept Away")
    client.put(f"/movies/{target.id}", json={"winner": False})
    body = client.get("/movies/analytics/producers-award-intervals").json()
    assert body["min"] == body["max"]
    assert body["max"][0]["producer"] == "Joel Silver"


def test_award_intervals_empty_store():
    app.dependency_overrides[get_repository] = lambda: MovieRepository()
    try:
        body = TestClient(app).get("/movies/analytics/producers-award-intervals").json()
    finally:
        app.dependency_overrides.clear()
    assert body == {"min": [], "max": []}


class _BrokenRepository(MovieRepository):
    def find_many(self, movie_filter=None):
        raise RuntimeError("boom")

    def list_all(self):
        raise RuntimeError("boom")


def test_store_failures_map_to_internal_error():
    app.dependency_overrides[get_repository] = lambda: _BrokenRepository()
    try:
        client = TestClient(app)
        assert client.get("/movies").status_code == 500
        assert client.get("/movies/analytics/producers-award-intervals").status_code == 500
    finally:
        app.dependency_overrides.clear()


def test_service_wraps_store_failures():
    with pytest.raises(movie_service.MovieStoreError):
        movie_service.get_award_intervals(_BrokenRepository())


def test_service_update_ignores_id_changes(repo):
    target = repo.list_all()[0]
    updated = movie_service.update_movie(repo, target.id, {"id": "hijack", "year": 1992})
    assert updated.id == target.id
    assert updated.year == 1992
    assert repo.find_by_id("hijack") is None


def test_lifespan_seeds_store_from_movie_list(monkeypatch, tmp_path):
    movie_list = tmp_path / "movielist.csv"
    movie_list.write_text(
        "year;title;studios;producers;winner\n"
        "1984;Bolero;Cannon Films;Bo Derek;yes\n"
        "1990;Ghosts Can't Do It;Triumph Releasing;Bo Derek;yes\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("MOVIE_LIST_PATH", str(movie_list))
    get_settings.cache_clear()
    try:
        with TestClient(app) as client:
            listed = client.get("/movies").json()
            intervals = client.get("/movies/analytics/producers-award-intervals").json()
    finally:
        get_settings.cache_clear()
        repository.clear()

    assert listed["total"] == 2
    assert intervals["max"] == [
        {"producer": "Bo Derek", "interval": 6, "previousWin": 1984, "followingWin": 1990}
    ]


@pytest.mark.parametrize(
    "overrides",
    [{"year": "2000"}, {"winner": "yes"}, {"winner": 1}, {"studios": "Columbia Pictures"}, {"title": 42}],
)
def test_create_movie_rejects_values_needing_coercion(client, repo, payload, overrides):
    response = client.post("/movies", json={**payload, **overrides})
    assert response.status_code == 422
    assert len(repo) == 5


@pytest.mark.parametrize(
    "changes",
    [{"year": "1999"}, {"winner": "yes"}, {"winner": 1}, {"producers": [7]}],
)
def test_update_movie_rejects_values_needing_coercion(client, repo, changes):
    target = repo.list_all()[4]
    response = client.put(f"/movies/{target.id}", json=changes)
    assert response.status_code == 422
    assert repo.find_by_id(target.id) == target


class _VanishingRepository(MovieRepository):
    """Deletes the movie right after it is looked up, as a concurrent request would."""

    def find_by_id(self, movie_id):
        movie = super().find_by_id(movie_id)
        self.delete(movie_id)
        return movie


def test_update_movie_deleted_meanwhile_is_not_found(repo):
    target = repo.list_all()[0]
    vanishing = _VanishingRepository(repo.list_all())
    with pytest.raises(movie_service.MovieNotFound):
        movie_service.update_movie(vanishing, target.id, {"year": 1992})
    assert vanishing.find_by_id(target.id) is None


def test_store_update_reports_whether_it_replaced(repo):
    target = repo.list_all()[0]
    assert repo.update(target.model_copy(update={"title": "Renamed"})) is True
    assert repo.update(Movie(title="Ghost", year=2000, studios=["S"], producers=["P"])) is False
