import json, os, pytest, sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from app import create_app
from models import db
from catalog.store import MemoryMovieStore, SeedError, load_seed

MOVIE = {
    "title": "Alien",
    "year": 1979,
    "director": "Ridley Scott",
    "duration": 117,
    "rate": 8,
    "poster": "https://img.example.com/alien.jpg",
    "genre": ["Horror", "Sci-fi"],
}


@pytest.fixture(params=["memory", "sql"])
def store(request):
    # both backends must honour the same contract
    app = create_app({"TESTING": True, "MOVIES_SEED": "", "MOVIE_STORE": request.param})
    with app.app_context():
        yield app.extensions["movie_store"]
        if request.param == "sql":
            db.session.remove()
            db.engine.dispose()


def test_insert_assigns_id_and_get_returns_copy(store):
    created = store.insert(MOVIE)
    assert created["id"]
    assert {k: created[k] for k in MOVIE} == MOVIE

    fetched = store.get(created["id"])
    assert fetched == created
    fetched["genre"].append("Drama")
    fetched["title"] = "changed"
    assert store.get(created["id"]) == created

def test_insert_keeps_given_id(store):
    created = store.insert(MOVIE, movie_id="fixed-id")
    assert created["id"] == "fixed-id"
    assert store.get("fixed-id")["title"] == "Alien"

def test_list_order_and_genre_filter(store):
    a = store.insert({**MOVIE, "title": "A", "genre": ["Action"]})
    b = store.insert({**MOVIE, "title": "B", "genre": ["Drama"]})
    c = store.insert({**MOVIE, "title": "C", "genre": ["Drama", "Action"]})
    assert [m["id"] for m in store.list()] == [a["id"], b["id"], c["id"]]
    assert [m["id"] for m in store.list(genre="aCtIoN")] == [a["id"], c["id"]]
    assert store.list(genre="comedy") == []
    assert store.count() == 3

def test_update_merges_fields(store):
    created = store.insert(MOVIE)
    merged = store.update(created["id"], {"year": 1986, "title": "Aliens"})
    assert merged == {**created, "year": 1986, "title": "Aliens"}
    assert store.get(created["id"]) == merged

def test_update_keeps_position(store):
    first = store.insert({**MOVIE, "title": "first"})
    store.insert({**MOVIE, "title": "second"})
    store.update(first["id"], {"rate": 1})
    assert [m["title"] for m in store.list()] == ["first", "second"]

def test_update_unknown_returns_none(store):
    assert store.update("missing", {"year": 2000}) is None

def test_delete(store):
    created = store.insert(MOVIE)
    assert store.delete(created["id"]) is True
    assert store.get(created["id"]) is None
    assert store.delete(created["id"]) is False
    assert store.count() == 0


def _write(tmp_path, rows):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(rows), encoding="utf-8")
    return path

def test_load_seed_validates_and_keeps_ids(tmp_path):
    path = _write(tmp_path, [{**MOVIE, "id": "seed-1"}, {k: v for k, v in MOVIE.items() if k != "rate"}])
    store = MemoryMovieStore()
    assert load_seed(store, path) == 2
    assert store.get("seed-1")["title"] == "Alien"
    assert store.list()[1]["rate"] == 5

def test_load_seed_rejects_invalid_record(tmp_path):
    path = _write(tmp_path, [{**MOVIE, "year": 1800}])
    with pytest.raises(SeedError):
        load_seed(MemoryMovieStore(), path)

def test_load_seed_rejects_duplicate_ids(tmp_path):
    path = _write(tmp_path, [{**MOVIE, "id": "dup"}, {**MOVIE, "id": "dup"}])
    with pytest.raises(SeedError):
        load_seed(MemoryMovieStore(), path)

def test_load_seed_rejects_non_array(tmp_path):
    path = _write(tmp_path, {"movies": []})
    with pytest.raises(SeedError):
        load_seed(MemoryMovieStore(), path)

def test_load_seed_missing_file(tmp_path):
    with pytest.raises(SeedError):
        load_seed(MemoryMovieStore(), tmp_path / "nope.json")
