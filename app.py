import logging
import os
from pathlib import Path

from flask import Flask
from sqlalchemy.engine import make_url

from models import db
from catalog.errors import install_json_error_handlers
from catalog.api import api_bp
from catalog.metrics import metrics_bp
from catalog.store import MemoryMovieStore, SqlMovieStore, load_seed

logger = logging.getLogger(__name__)

DEFAULT_SEED = Path(__file__).resolve().parent / "movies.json"


def _is_in_memory(uri: str) -> bool:
    url = make_url(uri)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def _build_store(app):
    backend = app.config["MOVIE_STORE"]
    if backend == "memory":
        return MemoryMovieStore()
    if backend == "sql":
        uri = app.config["SQLALCHEMY_DATABASE_URI"]
        # records live for the life of the process only
        if not _is_in_memory(uri):
            raise ValueError("MOVIE_STORE=sql only supports an in-memory SQLite DATABASE_URL")
        db.init_app(app)
        with app.app_context():
            db.create_all()
        logger.info("Using SQL movie store -> %s", uri)
        return SqlMovieStore()
    raise ValueError(f"MOVIE_STORE must be 'memory' or 'sql', got {backend!r}")


def create_app(test_config=None):
    app = Flask(__name__)

    # Load env config
    app.config.update(
        PORT=int(os.getenv("PORT", 1234)),
        MOVIE_STORE=os.getenv("MOVIE_STORE", "memory").strip().lower(),
        SQLALCHEMY_DATABASE_URI=os.getenv("DATABASE_URL", "sqlite://"),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        MOVIES_SEED=os.getenv("MOVIES_SEED", str(DEFAULT_SEED)),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # Installing JSON error handlers & the movie store
    install_json_error_handlers(app)
    store = _build_store(app)
    app.extensions["movie_store"] = store

    seed = app.config.get("MOVIES_SEED")
    if seed:
        with app.app_context():
            load_seed(store, seed)

    # CORS: every response is readable from any origin
    @app.after_request
    def _allow_any_origin(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    # Register blueprints
    app.register_blueprint(metrics_bp)
    app.register_blueprint(api_bp)

    return app


if __name__ == "__main__":
    app = create_app()
    logger.info("server listening on port %s", app.config["PORT"])
    app.run(host="0.0.0.0", port=app.config["PORT"])
