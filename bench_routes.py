"""
벤치마크 Flask Blueprint
========================

  GET  /bench/                 백엔드 목록과 기본값
  POST /bench/run/<backend>    {rounds, samples}로 실행하고 결과를 저장
  GET  /bench/runs             저장된 결과 목록
  POST /bench/runs/clear       저장된 결과 삭제
"""

import logging

from flask import Blueprint, jsonify, request
from tinydb import Query

from nizkp.bench import run_all
from nizkp.config import BACKENDS, MIMC_ROUNDS, RANDOMNESS_SEED, SAMPLES, BenchmarkConfig
from nizkp.errors import ConfigurationError, SynthesisError, VerificationFailed

from bench_serializers import parse_run_request, serialize_report

logger = logging.getLogger(__name__)

bench_bp = Blueprint('bench', __name__, url_prefix='/bench')

DATA = Query()

# DB는 app.py에서 주입
DB = None


def init_bench_bp(db):
    """app.py에서 DB를 주입받는다."""
    global DB
    DB = db


# ─── DB 헬퍼 ───

def db_insert_run(report):
    return DB.insert({"type": "bench.run", "data": report})


def db_runs():
    return [doc["data"] for doc in DB.search(DATA.type == "bench.run")]


def db_clear_runs():
    DB.remove(DATA.type == "bench.run")


# ──────────────────────────────────────────────────────────────
# 엔드포인트
# ──────────────────────────────────────────────────────────────

@bench_bp.route("/")
def index():
    """백엔드 목록과 기본 설정."""
    return jsonify({
        "backends": list(BACKENDS),
        "defaults": {
            "rounds": MIMC_ROUNDS,
            "samples": SAMPLES,
            "seed": RANDOMNESS_SEED.hex(),
        },
    })


@bench_bp.route("/run/<backend>", methods=["POST"])
def run_backend(backend):
    """백엔드 하나를 실행하고 결과를 저장한다."""
    if backend not in BACKENDS:
        return jsonify({"error": f"unknown backend: {backend}"}), 404
    try:
        rounds, samples = parse_run_request(request.get_json(silent=True))
        config = BenchmarkConfig(rounds=rounds, samples=samples, seed=RANDOMNESS_SEED, backends=(backend,))
        report = run_all(config)[0]
    except (ConfigurationError, SynthesisError) as e:
        return jsonify({"error": str(e)}), 400
    except VerificationFailed as e:
        logger.error("%s", e)
        return jsonify({"error": str(e)}), 500

    data = serialize_report(report)
    doc_id = db_insert_run(data)
    return jsonify({"id": doc_id, "report": data})


@bench_bp.route("/runs")
def list_runs():
    """저장된 실행 결과."""
    return jsonify({"runs": db_runs()})


@bench_bp.route("/runs/clear", methods=["POST"])
def clear_runs():
    db_clear_runs()
    return jsonify({"runs": []})
