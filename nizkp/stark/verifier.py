"""
STARK 증명 검증
===============

prover와 같은 순서로 fiat-shamir transcript를 재현한 뒤 다음을 확인한다.

  1. 증명 옵션이 허용 정책(AcceptableOptions)을 만족하는가
  2. OOD 프레임에서 계산한 합성 값 == Σ_i z^{i·n} · h_i(z)
  3. grinding nonce의 선행 0 비트 수
  4. 쿼리 위치의 trace / 합성 행이 커밋먼트에 포함되는가
  5. 그 행들로 계산한 DEEP 값이 FRI 저차 검사를 통과하는가

verify()는 bool을 반환하고, 거부 사유는 INFO 로그로 남긴다.
"""

import logging

from nizkp.errors import ConfigurationError, VerifierError
from nizkp.stark.air import EvaluationFrame
from nizkp.stark.domain import StarkDomain
from nizkp.stark.fri import FriVerifier
from nizkp.stark.merkle import MerkleTree
from nizkp.stark.prover import deep_composition, draw_deep_coefficients
from nizkp.stark.random_coin import RandomCoin, public_seed

logger = logging.getLogger(__name__)


def verify(proof, pub_inputs, acceptable_options, air_cls, hasher):
    if not acceptable_options.accepts(proof, hasher):
        logger.info("stark proof rejected: options %s are not acceptable under %r",
                    proof.options, acceptable_options)
        return False
    try:
        _verify(proof, pub_inputs, air_cls, hasher)
    except VerifierError as e:
        logger.info("stark proof rejected: %s", e)
        return False
    return True


def _check_openings(queries, positions, root, width, hasher, label):
    if len(queries) != len(positions):
        raise VerifierError(f"expected {len(positions)} {label} openings, got {len(queries)}")
    for p, row, path in zip(positions, queries.rows, queries.paths):
        if len(row) != width:
            raise VerifierError(f"{label} row at position {p} has {len(row)} values, expected {width}")
        if not MerkleTree.verify(root, p, hasher.hash_elements(row), path, hasher):
            raise VerifierError(f"{label} Merkle path at position {p} is invalid")


def _verify(proof, pub_inputs, air_cls, hasher):
    options = proof.options
    trace_info = proof.trace_info
    try:
        air = air_cls(trace_info, pub_inputs, options)
        field = air.extension
    except ConfigurationError as e:
        raise VerifierError(f"invalid proof context: {e}") from e
    ctx = air.context

    for root in (proof.trace_root, proof.composition_root):
        if len(root) != hasher.DIGEST_SIZE:
            raise VerifierError("commitment root has the wrong digest size")

    n = trace_info.length
    ce = ctx.composition_columns
    if len(proof.ood_trace_current) != trace_info.width or len(proof.ood_trace_next) != trace_info.width:
        raise VerifierError("out-of-domain trace frame has the wrong width")
    if len(proof.ood_composition) != ce:
        raise VerifierError("out-of-domain composition frame has the wrong width")

    domain = StarkDomain(n, options.blowup_factor)
    coin = RandomCoin(hasher, public_seed(trace_info, options, pub_inputs.to_elements()))

    coin.reseed(proof.trace_root)
    num_coefficients = air.num_transition_constraints() + len(air.get_assertions())
    coefficients = [coin.draw_pair(field) for _ in range(num_coefficients)]

    coin.reseed(proof.composition_root)
    z = domain.draw_ood_point(coin, field)
    z_next = z * domain.trace_generator

    frame = EvaluationFrame(proof.ood_trace_current, proof.ood_trace_next)
    expected = air.evaluate_constraints(frame, z, coefficients)
    actual = z * 0
    for i, value in enumerate(proof.ood_composition):
        actual = actual + value * z ** (i * n)
    if actual != expected:
        raise VerifierError("constraint evaluations at the out-of-domain point do not match")

    ood = (proof.ood_trace_current, proof.ood_trace_next, proof.ood_composition)
    coin.reseed(hasher.hash_elements(proof.ood_trace_current + proof.ood_trace_next + proof.ood_composition))
    deep_coeffs = draw_deep_coefficients(coin, field, trace_info.width, ce)

    fri = FriVerifier(proof, domain, n, options, hasher, field, coin)

    if not coin.check_leading_zeros(proof.pow_nonce, options.grinding_factor):
        raise VerifierError("proof-of-work nonce does not satisfy the grinding factor")
    positions = coin.draw_integers(options.num_queries, domain.lde_size, proof.pow_nonce)

    _check_openings(proof.trace_queries, positions, proof.trace_root, trace_info.width, hasher, "trace")
    _check_openings(proof.composition_queries, positions, proof.composition_root, ce, hasher, "composition")

    evaluations = [
        deep_composition(trace_row, composition_row, domain.lde_point(p), z, z_next, ood, deep_coeffs)
        for p, trace_row, composition_row in zip(
            positions, proof.trace_queries.rows, proof.composition_queries.rows)
    ]
    fri.verify(positions, evaluations)
