"""
벤치마크 데이터 직렬화 헬퍼
===========================

TinyDB에 저장 가능한 형태(JSON 호환 dict)로 벤치마크 객체를 변환한다.
ProofMetrics, BenchmarkReport, 실행 요청 파라미터.
"""

from nizkp.config import MIMC_ROUNDS
from nizkp.errors import ConfigurationError


# ─── ProofMetrics ───

def serialize_metrics(metrics):
    """ProofMetrics → dict"""
    return {
        "runtime_size": metrics.runtime_size,
        "serialized_size": metrics.serialized_size,
        "conjectured_security": metrics.conjectured_security,
        "proven_security": metrics.proven_security,
        "security": metrics.security_label(),
        "extra": {key: _plain(value) for key, value in metrics.extra.items()},
    }


def _plain(value):
    if isinstance(value, (int, float, str, bool)) or value is None:
        return value
    return str(value)


# ─── BenchmarkReport ───

def serialize_report(report):
    """BenchmarkReport → dict"""
    return {
        "backend": report.backend,
        "rounds": report.rounds,
        "samples": report.samples,
        "metrics": serialize_metrics(report.metrics),
        "prove_times": list(report.prove_times),
        "verify_times": list(report.verify_times),
        "prove_avg": report.prove_avg,
        "verify_avg": report.verify_avg,
    }


# ─── 실행 요청 ───

MAX_SAMPLES = 100


def parse_run_request(data):
    """요청 JSON {rounds, samples} → (rounds, samples)

    Raises:
        ConfigurationError: 정수가 아니거나 범위를 벗어날 때
    """
    data = data or {}
    try:
        rounds = int(data.get("rounds", MIMC_ROUNDS))
        samples = int(data.get("samples", 0))
    except (TypeError, ValueError):
        raise ConfigurationError("rounds and samples must be integers") from None
    if rounds < 1:
        raise ConfigurationError("rounds must be positive")
    if not 0 <= samples <= MAX_SAMPLES:
        raise ConfigurationError(f"samples must be in 0..{MAX_SAMPLES}")
    return rounds, samples
