import copy
import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy import func

from models import db, Movie
from .validation import validate_movie

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class SeedError(Exception):
    pass


def new_movie_id() -> str:
    return str(uuid.uuid4())


def _genre_matches(record: Record, genre: Optional[str]) -> bool:
    if not genre:
        return True
    wanted = genre.lower()
    return any(g.lower() == wanted for g in record.get("genre", []))


class MovieStore:
    """
    Storage contract used by the HTTP handlers.

    Records go in and come out as plain dicts; implementations hand back
    copies so callers can never mutate stored state by accident.
    """

    def list(self, genre: Optional[str] = None) -> List[Record]:
        raise NotImplementedError

    def get(self, movie_id: str) -> Optional[Record]:
        raise NotImplementedError

    def insert(self, data: Record, movie_id: Optional[str] = None) -> Record:
        raise NotImplementedError

    def update(self, movie_id: str, changes: Record) -> Optional[Record]:
        raise NotImplementedError

    def delete(self, movie_id: str) -> bool:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError


class MemoryMovieStore(MovieStore):
    """Process-local list; lost on restart and not safe for concurrent writers."""

    def __init__(self, records: Optional[List[Record]] = None):
        self._records: List[Record] = [copy.deepcopy(r) for r in (records or [])]

    def _index(self, movie_id: str) -> int:
        for idx, record in enumerate(self._records):
            if record["id"] == movie_id:
                return idx
        return -1

    def list(self, genre=None):
        return [copy.deepcopy(r) for r in self._records if _genre_matches(r, genre)]

    def get(self, movie_id):
        idx = self._index(movie_id)
        return copy.deepcopy(self._records[idx]) if idx != -1 else None

    def insert(self, data, movie_id=None):
        record = {"id": movie_id or new_movie_id(), **copy.deepcopy(data)}
        self._records.append(record)
        return copy.deepcopy(record)

    def update(self, movie_id, changes):
        idx = self._index(movie_id)
        if idx == -1:
            return None
        merged = {**self._records[idx], **copy.deepcopy(changes), "id": movie_id}
        self._records[idx] = merged
        return copy.deepcopy(merged)

    def delete(self, movie_id):
        idx = self._index(movie_id)
        if idx == -1:
            return False
        del self._records[idx]
        return True

    def count(self):
        return len(self._records)


class SqlMovieStore(MovieStore):
    """Same contract over Flask-SQLAlchemy; needs an application context."""

    _COLUMNS = ("title", "year", "director", "duration", "rate", "poster", "genre")

    def list(self, genre=None):
        rows = [m.to_dict() for m in Movie.query.order_by(Movie.position.asc()).all()]
        return [r for r in rows if _genre_matches(r, genre)]

    def get(self, movie_id):
        m = db.session.get(Movie, movie_id)
        return m.to_dict() if m else None

    def insert(self, data, movie_id=None):
        last = db.session.query(func.max(Movie.position)).scalar()
        m = Movie(id=movie_id or new_movie_id(), position=(last or 0) + 1)
        for col in self._COLUMNS:
            if col in data:
                setattr(m, col, copy.deepcopy(data[col]))
        db.session.add(m); db.session.commit()
        return m.to_dict()

    def update(self, movie_id, changes):
        m = db.session.get(Movie, movie_id)
        if m is None:
            return None
        for col in self._COLUMNS:
            if col in changes:
                setattr(m, col, copy.deepcopy(changes[col]))
        db.session.commit()
        return m.to_dict()

    def delete(self, movie_id):
        m = db.session.get(Movie, movie_id)
        if m is None:
            return False
        db.session.delete(m); db.session.commit()
        return True

    def count(self):
        return Movie.query.count()


def load_seed(store: MovieStore, path) -> int:
    """Validate and insert every record of a JSON array file, keeping its ids."""
    path = Path(path)
    try:
        rows = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise SeedError(f"cannot read seed file {path}: {e}") from e
    if not isinstance(rows, list):
        raise SeedError(f"seed file {path} must contain a JSON array")

    for idx, row in enumerate(rows):
        result = validate_movie(row)
        if not result.success:
            raise SeedError(f"seed record {idx} in {path} is invalid: {result.issues}")
        movie_id = row.get("id")
        if movie_id is not None and not isinstance(movie_id, str):
            raise SeedError(f"seed record {idx} in {path} has a non-string id")
        if movie_id is not None and store.get(movie_id) is not None:
            raise SeedError(f"seed record {idx} in {path} duplicates id {movie_id}")
        store.insert(result.data, movie_id=movie_id)

    logger.info("Seeded %d movies from %s", len(rows), path)
    return len(rows)
