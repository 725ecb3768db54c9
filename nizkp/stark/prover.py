"""
STARK 증명 생성
===============

  1. trace 열 보간 → LDE 코셋에서 평가 → 행 단위 Merkle 커밋
  2. 합성 계수 (α, β) 추출 → 합성 다항식 H를 LDE에서 평가 → ce개 열로 분할 후 커밋
       H(x) = Σ_i x^{i·n} · h_i(x),  deg h_i < n
  3. OOD 점 z 추출 → T_j(z), T_j(z·ω), h_i(z) 공개
  4. DEEP 합성
       D(x) = Σ_j γ_j (T_j(x) - T_j(z)) / (x - z) + γ'_j (T_j(x) - T_j(zω)) / (x - zω)
            + Σ_i δ_i (h_i(x) - h_i(z)) / (x - z)
  5. D에 대한 FRI (차수 상한 n)
  6. grinding nonce → 쿼리 위치 → 각 커밋먼트 열기

fiat-shamir 순서는 verifier와 정확히 같아야 한다.
"""

import logging
from abc import ABC, abstractmethod

from nizkp.polynomial import coset_fft, coset_ifft, evaluate, ifft, pad
from nizkp.stark.air import EvaluationFrame
from nizkp.stark.domain import StarkDomain
from nizkp.stark.fri import FriProver
from nizkp.stark.merkle import MerkleTree
from nizkp.stark.proof import Queries, StarkProof
from nizkp.stark.random_coin import RandomCoin, public_seed

logger = logging.getLogger(__name__)


def transpose(columns):
    return [list(row) for row in zip(*columns)]


def commit_rows(rows, hasher):
    return MerkleTree([hasher.hash_elements(row) for row in rows], hasher)


def draw_deep_coefficients(coin, field, trace_width, composition_columns):
    trace = [coin.draw_pair(field) for _ in range(trace_width)]
    composition = [coin.draw(field) for _ in range(composition_columns)]
    return trace, composition


def deep_composition(trace_row, composition_row, x, z, z_next, ood, coefficients):
    """한 점 x에서의 DEEP 합성 값. ood = (T(z), T(zω), h(z))."""
    ood_current, ood_next, ood_composition = ood
    trace_coeffs, composition_coeffs = coefficients
    inv_z = 1 / (x - z)
    inv_z_next = 1 / (x - z_next)

    result = z * 0
    for value, cur, nxt, (gamma, gamma_next) in zip(trace_row, ood_current, ood_next, trace_coeffs):
        result = result + gamma * (value - cur) * inv_z + gamma_next * (value - nxt) * inv_z_next
    for value, at_z, delta in zip(composition_row, ood_composition, composition_coeffs):
        result = result + delta * (value - at_z) * inv_z
    return result


def find_pow_nonce(coin, grinding_factor):
    nonce = 0
    while not coin.check_leading_zeros(nonce, grinding_factor):
        nonce += 1
    return nonce


class Prover(ABC):
    """구체적인 계산의 prover는 air_cls와 get_pub_inputs()를 정의한다."""

    air_cls = None

    def __init__(self, options, hasher):
        self.options = options
        self.hasher = hasher

    @abstractmethod
    def get_pub_inputs(self, trace):
        pass

    def prove(self, trace):
        options, hasher = self.options, self.hasher
        trace_info = trace.info()
        pub_inputs = self.get_pub_inputs(trace)
        air = self.air_cls(trace_info, pub_inputs, options)
        field = air.extension
        ctx = air.context

        n = trace_info.length
        domain = StarkDomain(n, options.blowup_factor)
        N = domain.lde_size
        coin = RandomCoin(hasher, public_seed(trace_info, options, pub_inputs.to_elements()))

        # 1. trace LDE
        trace_polys = [ifft(column, domain.trace_generator) for column in trace.columns]
        zero = trace.columns[0][0].zero()
        trace_lde = [coset_fft(pad(p, N, zero), domain.lde_generator, domain.offset) for p in trace_polys]
        trace_rows = transpose(trace_lde)
        trace_tree = commit_rows(trace_rows, hasher)
        coin.reseed(trace_tree.root)

        # 2. 합성 다항식
        num_coefficients = air.num_transition_constraints() + len(air.get_assertions())
        coefficients = [coin.draw_pair(field) for _ in range(num_coefficients)]
        step = options.blowup_factor
        composition_evals = [
            air.evaluate_constraints(EvaluationFrame(trace_rows[i], trace_rows[(i + step) % N]), x, coefficients)
            for i, x in enumerate(domain.lde_points)
        ]
        composition_coeffs = coset_ifft(composition_evals, domain.lde_generator, domain.offset)
        ce = ctx.composition_columns
        composition_polys = [composition_coeffs[i * n:(i + 1) * n] for i in range(ce)]
        composition_lde = [
            coset_fft(pad(p, N, field.zero()), domain.lde_generator, domain.offset)
            for p in composition_polys
        ]
        composition_rows = transpose(composition_lde)
        composition_tree = commit_rows(composition_rows, hasher)
        coin.reseed(composition_tree.root)

        # 3. OOD 프레임
        z = domain.draw_ood_point(coin, field)
        z_next = z * domain.trace_generator
        ood_current = [evaluate(p, z) for p in trace_polys]
        ood_next = [evaluate(p, z_next) for p in trace_polys]
        ood_composition = [evaluate(p, z) for p in composition_polys]
        coin.reseed(hasher.hash_elements(ood_current + ood_next + ood_composition))

        # 4. DEEP 합성
        deep_coeffs = draw_deep_coefficients(coin, field, trace_info.width, ce)
        ood = (ood_current, ood_next, ood_composition)
        deep_evals = [
            deep_composition(trace_rows[i], composition_rows[i], x, z, z_next, ood, deep_coeffs)
            for i, x in enumerate(domain.lde_points)
        ]

        # 5. FRI
        fri = FriProver(options, hasher, field)
        fri.build_layers(deep_evals, n, domain, coin)

        # 6. grinding과 쿼리
        pow_nonce = find_pow_nonce(coin, options.grinding_factor)
        positions = coin.draw_integers(options.num_queries, N, pow_nonce)

        trace_queries, composition_queries = Queries(), Queries()
        for p in positions:
            trace_queries.add(trace_rows[p], trace_tree.prove(p))
            composition_queries.add(composition_rows[p], composition_tree.prove(p))

        logger.debug("stark proof: trace %dx%d, lde %d, %d queries, nonce %d",
                     trace_info.width, n, N, len(positions), pow_nonce)
        return StarkProof(
            trace_info=trace_info,
            options=options,
            trace_root=trace_tree.root,
            composition_root=composition_tree.root,
            ood_trace_current=ood_current,
            ood_trace_next=ood_next,
            ood_composition=ood_composition,
            fri_roots=fri.roots,
            fri_remainder=fri.remainder,
            pow_nonce=pow_nonce,
            trace_queries=trace_queries,
            composition_queries=composition_queries,
            fri_queries=fri.build_queries(positions),
        )

