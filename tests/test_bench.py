"""
벤치마크 하니스 테스트
"""
import pytest

from nizkp.backend import MiMCBackend, ProofMetrics, runtime_size
from nizkp.bench import BenchmarkReport, benchmark, create_backend, iter_backends, run, run_all
from nizkp.config import BenchmarkConfig
from nizkp.errors import ConfigurationError, VerificationFailed
from nizkp.mimc.bulletproof import BulletproofMiMC
from nizkp.mimc.snark import Groth16MiMC
from nizkp.mimc.stark import StarkMiMC, default_options

from conftest import SEED, SMALL_ROUNDS


class RejectingBackend(MiMCBackend):
    """항상 거부하는 백엔드 (정확성 검사 경로 확인용)."""

    name = "rejecting"

    def setup(self):
        self.is_setup = True

    def prove(self):
        return b"proof"

    def verify(self, artifact, constants=None, image=None):
        return False

    def proof_metrics(self, artifact):
        return ProofMetrics(runtime_size(artifact), len(artifact))


# ─────────────────────────────────────────────────────────────────────
# 백엔드 생성
# ─────────────────────────────────────────────────────────────────────

class TestCreateBackend:
    @pytest.mark.parametrize("name, cls", [
        ("snark", Groth16MiMC),
        ("stark", StarkMiMC),
        ("bulletproof", BulletproofMiMC),
    ])
    def test_registry(self, name, cls):
        backend = create_backend(name, SMALL_ROUNDS, SEED)
        assert isinstance(backend, cls)
        assert backend.name == name
        assert backend.rounds == SMALL_ROUNDS

    def test_defaults(self):
        backend = create_backend("stark")
        assert backend.rounds == 255
        assert backend.seed == bytes([24] * 32)

    def test_backend_options(self):
        backend = create_backend("bulletproof", SMALL_ROUNDS, SEED, capacity=64)
        assert backend.capacity == 64

    def test_unknown(self):
        with pytest.raises(ConfigurationError):
            create_backend("plonk")


# ─────────────────────────────────────────────────────────────────────
# 하니스
# ─────────────────────────────────────────────────────────────────────

class TestBenchmark:
    def test_stark_samples(self):
        report = benchmark(create_backend("stark", SMALL_ROUNDS, SEED), samples=2)
        assert isinstance(report, BenchmarkReport)
        assert report.backend == "stark"
        assert report.samples == 2
        assert len(report.prove_times) == len(report.verify_times) == 2
        assert report.prove_avg > 0
        assert report.metrics.conjectured_security == 121

    def test_zero_samples(self):
        report = benchmark(create_backend("stark", SMALL_ROUNDS, SEED), samples=0)
        assert report.prove_times == []
        assert report.prove_avg is None
        assert report.verify_avg is None

    def test_negative_samples(self):
        with pytest.raises(ConfigurationError):
            benchmark(create_backend("stark", SMALL_ROUNDS, SEED), samples=-1)

    def test_rejection_is_fatal(self):
        with pytest.raises(VerificationFailed) as info:
            benchmark(RejectingBackend(SMALL_ROUNDS, SEED), samples=1)
        assert info.value.backend == "rejecting"

    def test_run(self):
        metrics = run(create_backend("stark", SMALL_ROUNDS, SEED))
        assert metrics.serialized_size > 0

    def test_bulletproof_sample(self):
        report = benchmark(create_backend("bulletproof", SMALL_ROUNDS, SEED), samples=1)
        assert report.metrics.conjectured_security is None
        assert len(report.verify_times) == 1


class TestRunAll:
    def test_stark_only(self):
        config = BenchmarkConfig(rounds=SMALL_ROUNDS, samples=1, backends=("stark",),
                                 stark_options={"options": default_options()})
        reports = run_all(config)
        assert [r.backend for r in reports] == ["stark"]

    @pytest.mark.parametrize("kwargs", [
        {"rounds": 0},
        {"samples": -1},
        {"seed": b"short"},
        {"backends": ("stark", "plonk")},
        {"rounds": 6},
        {"rounds": 3, "backends": ("stark",)},
    ])
    def test_invalid_config(self, kwargs):
        with pytest.raises(ConfigurationError):
            run_all(BenchmarkConfig(**kwargs))

    def test_round_count_only_binds_stark(self):
        """R = 6은 STARK trace 조건을 어기지만 R1CS 백엔드에는 문제가 없다."""
        BenchmarkConfig(rounds=6, backends=("snark", "bulletproof")).validate()

    def test_iter_backends_follows_config(self):
        config = BenchmarkConfig(rounds=SMALL_ROUNDS, backends=("bulletproof", "snark"))
        backends = list(iter_backends(config))
        assert [b.name for b in backends] == ["bulletproof", "snark"]
        assert all(b.rounds == SMALL_ROUNDS and b.seed == SEED for b in backends)
        assert not any(b.is_setup for b in backends)


class TestRuntimeSize:
    def test_counts_nested_objects(self):
        assert runtime_size([1, 2, 3]) > runtime_size([])

    def test_handles_cycles(self):
        a = []
        a.append(a)
        assert runtime_size(a) > 0

    def test_slots(self):
        from nizkp.stark.field import QuadExtElement
        assert runtime_size(QuadExtElement(1, 2)) > 0
