"""
FRI 저차 검사 테스트
"""
from dataclasses import replace
from types import SimpleNamespace

import pytest

from nizkp.errors import ConfigurationError, VerifierError
from nizkp.mimc.stark import default_options
from nizkp.polynomial import coset_fft, evaluate, get_root_of_unity, pad
from nizkp.stark.domain import StarkDomain
from nizkp.stark.field import BaseElement
from nizkp.stark.fri import FriProver, FriVerifier, fold_row, num_fri_layers
from nizkp.stark.hashers import Blake3_256
from nizkp.stark.random_coin import RandomCoin


TRACE_LENGTH = 64
BLOWUP = 8
POSITIONS = [3, 100, 257, 511]


def _options():
    return replace(default_options(), fri_folding_factor=2, fri_remainder_max_degree=7)


def _evaluations(domain, degree):
    coeffs = [BaseElement(7 * i + 3) for i in range(degree)]
    return coset_fft(pad(coeffs, domain.lde_size, BaseElement.zero()), domain.lde_generator, domain.offset)


def _prove(domain, evaluations, options):
    hasher = Blake3_256()
    prover = FriProver(options, hasher, BaseElement)
    prover.build_layers(evaluations, TRACE_LENGTH, domain, RandomCoin(hasher, b"fri-test"))
    return SimpleNamespace(
        fri_roots=prover.roots,
        fri_remainder=prover.remainder,
        fri_queries=prover.build_queries(POSITIONS),
    )


def _verifier(domain, proof, options):
    hasher = Blake3_256()
    return FriVerifier(proof, domain, TRACE_LENGTH, options, hasher, BaseElement,
                       RandomCoin(hasher, b"fri-test"))


# ─────────────────────────────────────────────────────────────────────
# 레이어 수
# ─────────────────────────────────────────────────────────────────────

class TestNumLayers:
    @pytest.mark.parametrize("domain_size, degree_bound, expected", [
        (64, 8, (0, 8)),          # R = 7
        (512, 64, (1, 8)),        # R = 63
        (2048, 256, (1, 32)),     # R = 255
    ])
    def test_default_options(self, domain_size, degree_bound, expected):
        assert num_fri_layers(domain_size, degree_bound, default_options()) == expected

    def test_binary_folding(self):
        assert num_fri_layers(512, 64, _options()) == (3, 8)

    def test_domain_too_small(self):
        options = replace(default_options(), fri_folding_factor=16, fri_remainder_max_degree=0)
        with pytest.raises(ConfigurationError):
            num_fri_layers(16, 1024, options)


class TestFoldRow:
    def test_binary_fold(self):
        """f(x) = f_e(x²) + x·f_o(x²) → f'(y) = f_e(y) + α·f_o(y)"""
        coeffs = [BaseElement(c) for c in (3, 5, 7, 11)]
        x0, alpha = BaseElement(9), BaseElement(13)
        zeta = get_root_of_unity(BaseElement, 2)
        row = [evaluate(coeffs, x0), evaluate(coeffs, -x0)]
        y = x0 * x0
        expected = evaluate(coeffs[0::2], y) + alpha * evaluate(coeffs[1::2], y)
        assert fold_row(row, x0, alpha, zeta) == expected


# ─────────────────────────────────────────────────────────────────────
# 증명과 검증
# ─────────────────────────────────────────────────────────────────────

class TestFri:
    @pytest.fixture(scope="class")
    def domain(self):
        return StarkDomain(TRACE_LENGTH, BLOWUP)

    @pytest.fixture(scope="class")
    def low_degree(self, domain):
        evaluations = _evaluations(domain, TRACE_LENGTH)
        return evaluations, _prove(domain, evaluations, _options())

    def test_layers(self, low_degree):
        _, proof = low_degree
        assert len(proof.fri_roots) == 3
        assert len(proof.fri_remainder) == 8
        assert all(len(q) > 0 for q in proof.fri_queries)

    def test_accepts_low_degree(self, domain, low_degree):
        evaluations, proof = low_degree
        verifier = _verifier(domain, proof, _options())
        verifier.verify(POSITIONS, [evaluations[p] for p in POSITIONS])

    def test_wrong_evaluation(self, domain, low_degree):
        evaluations, proof = low_degree
        values = [evaluations[p] for p in POSITIONS]
        values[1] = values[1] + 1
        with pytest.raises(VerifierError):
            _verifier(domain, proof, _options()).verify(POSITIONS, values)

    def test_rejects_high_degree(self, domain):
        evaluations = _evaluations(domain, 4 * TRACE_LENGTH)
        proof = _prove(domain, evaluations, _options())
        with pytest.raises(VerifierError):
            _verifier(domain, proof, _options()).verify(POSITIONS, [evaluations[p] for p in POSITIONS])

    def test_layer_count_mismatch(self, domain, low_degree):
        _, proof = low_degree
        truncated = SimpleNamespace(
            fri_roots=proof.fri_roots[:-1],
            fri_remainder=proof.fri_remainder,
            fri_queries=proof.fri_queries[:-1],
        )
        with pytest.raises(VerifierError):
            _verifier(domain, truncated, _options())

    def test_oversized_remainder(self, domain, low_degree):
        _, proof = low_degree
        padded = SimpleNamespace(
            fri_roots=proof.fri_roots,
            fri_remainder=proof.fri_remainder + [BaseElement.zero()],
            fri_queries=proof.fri_queries,
        )
        with pytest.raises(VerifierError):
            _verifier(domain, padded, _options())
