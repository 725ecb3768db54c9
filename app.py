import logging
import os

from flask import Flask, jsonify
from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from bench_routes import bench_bp, init_bench_bp


def create_db(path=None):
    """path가 없으면 NIZKP_DB_PATH, 그것도 없으면 메모리 DB."""
    path = path or os.environ.get("NIZKP_DB_PATH")
    if path:
        return TinyDB(path)  # Storage DB
    return TinyDB(storage=MemoryStorage)  # Memory DB


def create_app(db=None):
    app = Flask(__name__)
    app.secret_key = os.environ.get("NIZKP_SECRET_KEY", "key")

    init_bench_bp(create_db() if db is None else db)
    app.register_blueprint(bench_bp)

    @app.route("/")
    def main():
        return jsonify({"service": "nizkp-mimc", "endpoints": ["/bench/"]})

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_app().run(debug=True)
