"""
벤치마크 하니스
===============

백엔드마다 다음 순서로 실행한다.

  1. setup()                 시간 측정 제외
  2. 정확성 검사             prove → verify, 거부되면 VerificationFailed
  3. 시간 측정 샘플 N회       prove와 verify를 각각 time.perf_counter로 측정
  4. 지표 수집               ProofMetrics (크기, 보안 수준)

같은 SeededRng 스트림이 정확성 검사에서 시간 측정 루프까지 이어진다.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List

from nizkp.backend import ProofMetrics
from nizkp.config import BACKENDS, SAMPLES
from nizkp.errors import ConfigurationError, VerificationFailed
from nizkp.mimc.bulletproof import BulletproofMiMC
from nizkp.mimc.snark import Groth16MiMC
from nizkp.mimc.stark import StarkMiMC

logger = logging.getLogger(__name__)

REGISTRY = {
    "snark": Groth16MiMC,
    "stark": StarkMiMC,
    "bulletproof": BulletproofMiMC,
}


def create_backend(name, rounds=None, seed=None, **kwargs):
    """이름으로 백엔드를 만든다. kwargs는 백엔드별 옵션 (capacity, options, hasher 등)."""
    try:
        cls = REGISTRY[name]
    except KeyError:
        raise ConfigurationError(f"unknown backend {name!r}, expected one of {BACKENDS}") from None
    return cls(rounds, seed, **kwargs)


@dataclass
class BenchmarkReport:
    backend: str
    rounds: int
    samples: int
    metrics: ProofMetrics
    prove_times: List[float] = field(default_factory=list)
    verify_times: List[float] = field(default_factory=list)

    @staticmethod
    def _average(values):
        return sum(values) / len(values) if values else None

    @property
    def prove_avg(self):
        return self._average(self.prove_times)

    @property
    def verify_avg(self):
        return self._average(self.verify_times)


def run(backend):
    """setup과 정확성 검사 한 번. ProofMetrics를 반환한다."""
    return backend.run()


def benchmark(backend, samples=SAMPLES):
    if samples < 0:
        raise ConfigurationError("samples must not be negative")

    metrics = run(backend)

    report = BenchmarkReport(backend.name, backend.rounds, samples, metrics)
    for i in range(samples):
        start = time.perf_counter()
        artifact = backend.prove()
        report.prove_times.append(time.perf_counter() - start)

        start = time.perf_counter()
        ok = backend.verify(artifact)
        report.verify_times.append(time.perf_counter() - start)

        if not ok:
            logger.error("%s: sample %d was rejected", backend.name, i)
            raise VerificationFailed(backend.name)

    if samples:
        logger.info("%s: average proving %.6fs, verifying %.6fs over %d samples",
                    backend.name, report.prove_avg, report.verify_avg, samples)
    return report


def iter_backends(config):
    """검증된 BenchmarkConfig의 백엔드를 순서대로 만든다."""
    config.validate()
    for name in config.backends:
        kwargs = config.stark_options if name == "stark" else {}
        yield create_backend(name, config.rounds, config.seed, **kwargs)


def run_all(config):
    """BenchmarkConfig의 백엔드를 순서대로 실행해 BenchmarkReport 리스트를 반환한다."""
    return [benchmark(backend, config.samples) for backend in iter_backends(config)]
