import logging

from flask import Blueprint, current_app, jsonify, request

from .errors import NotFoundError, ValidationError, expect_json, read_json
from .metrics import record_write
from .store import MovieStore
from .validation import validate_movie, validate_partial_movie

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)  # blueprint for movie routes

def _store() -> MovieStore:
    return current_app.extensions["movie_store"]

@api_bp.get("/")
def index():
    return {"message": "Hola mundo"}

@api_bp.get("/health")
def health():
    return {"status": "ok", "movies": _store().count()}

@api_bp.get("/movies")
def list_movies():
    genre = request.args.get("genre") or None
    movies = _store().list(genre=genre)
    logger.debug("Listing %d movies (genre=%r)", len(movies), genre)
    return jsonify(movies)

@api_bp.get("/movies/<movie_id>", provide_automatic_options=False)
def get_movie(movie_id):
    movie = _store().get(movie_id)
    if movie is None:
        logger.warning("Movie %s requested but not found", movie_id)
        raise NotFoundError("movie not found")
    return movie

@api_bp.post("/movies")
def create_movie():
    expect_json()
    result = validate_movie(read_json())
    if not result.success:
        raise ValidationError(result.issues)

    movie = _store().insert(result.data)
    logger.info("Created movie %s (%s)", movie["id"], movie["title"])
    record_write("create")
    return movie, 201

@api_bp.delete("/movies/<movie_id>", provide_automatic_options=False)
def delete_movie(movie_id):
    if not _store().delete(movie_id):
        logger.warning("Delete of unknown movie %s", movie_id)
        raise NotFoundError("Movie not found")
    logger.info("Deleted movie %s", movie_id)
    record_write("delete")
    return {"message": "Movie deleted"}

@api_bp.patch("/movies/<movie_id>", provide_automatic_options=False)
def update_movie(movie_id):
    expect_json()
    result = validate_partial_movie(read_json())
    if not result.success:
        raise ValidationError(result.issues)

    movie = _store().update(movie_id, result.data)
    if movie is None:
        logger.warning("Update of unknown movie %s", movie_id)
        raise NotFoundError("Movie not found")
    logger.info("Updated movie %s fields=%s", movie_id, sorted(result.data))
    record_write("update")
    return movie

@api_bp.route("/movies/<movie_id>", methods=["OPTIONS"])
def movie_preflight(movie_id):
    # CORS preflight for PATCH/DELETE
    return "", 204, {"Access-Control-Allow-Methods": "*"}
