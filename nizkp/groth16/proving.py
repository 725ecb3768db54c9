"""
Groth16 증명 생성
=================

  A = α + Σ w_i·u_i(τ) + r·δ                         (G1)
  B = β + Σ w_i·v_i(τ) + s·δ                         (G2, C 계산용으로 G1에서도)
  C = Σ_aux w_j·l_j + Σ h_i·h_query_i + s·A + r·B_g1 - r·s·δ

h(x) = (a(x)·b(x) - c(x)) / Z(x)는 코셋 {g·ω^i} 위에서 계산한다. 코셋에서는
Z(g·ω^i) = g^m - 1 이 상수이므로 점별 나눗셈 한 번으로 충분하다.
"""

import logging

from nizkp.ec import (
    FR, compress_g1, compress_g2, decompress_g1, decompress_g2, ec_add, ec_mul, ec_neg, msm,
    G1_COMPRESSED_SIZE, G2_COMPRESSED_SIZE, G1_UNCOMPRESSED_SIZE, G2_UNCOMPRESSED_SIZE,
)
from nizkp.errors import SynthesisError
from nizkp.polynomial import coset_fft, coset_ifft, get_root_of_unity, ifft, pad
from nizkp.groth16.constraint_system import synthesize_for_proving

logger = logging.getLogger(__name__)

COSET_SHIFT = FR(FR.GENERATOR)


class Proof:
    """Groth16 증명 (A ∈ G1, B ∈ G2, C ∈ G1)."""

    SIZE = 2 * G1_COMPRESSED_SIZE + G2_COMPRESSED_SIZE
    UNCOMPRESSED_SIZE = 2 * G1_UNCOMPRESSED_SIZE + G2_UNCOMPRESSED_SIZE

    def __init__(self, a, b, c):
        self.a = a
        self.b = b
        self.c = c

    def to_bytes(self):
        return compress_g1(self.a) + compress_g2(self.b) + compress_g1(self.c)

    @classmethod
    def from_bytes(cls, data):
        if len(data) != cls.SIZE:
            raise ValueError(f"groth16 proof must be {cls.SIZE} bytes, got {len(data)}")
        a = decompress_g1(data[:G1_COMPRESSED_SIZE])
        b = decompress_g2(data[G1_COMPRESSED_SIZE:G1_COMPRESSED_SIZE + G2_COMPRESSED_SIZE])
        c = decompress_g1(data[G1_COMPRESSED_SIZE + G2_COMPRESSED_SIZE:])
        return cls(a, b, c)


def compute_h(a, b, c, m):
    """제약별 평가값 a, b, c로부터 h(x) 계수 (길이 m-1)."""
    omega = get_root_of_unity(FR, m)
    zero = FR(0)
    a = coset_fft(ifft(pad(a, m, zero), omega), omega, COSET_SHIFT)
    b = coset_fft(ifft(pad(b, m, zero), omega), omega, COSET_SHIFT)
    c = coset_fft(ifft(pad(c, m, zero), omega), omega, COSET_SHIFT)

    z_inv = FR(1) / (COSET_SHIFT ** m - FR(1))
    quotient = [(x * y - z) * z_inv for x, y, z in zip(a, b, c)]
    h = coset_ifft(quotient, omega, COSET_SHIFT)
    if h[m - 1] != zero:
        raise SynthesisError("constraint system is not satisfied by the assignment")
    return h[:m - 1]


def create_proof(circuit, params, rng):
    """witness와 함께 회로를 합성하고 증명을 만든다.

    Raises:
        AssignmentMissing: witness 값이 없을 때
        ShapeMismatch: 회로가 형태 검사에 실패할 때
    """
    prover = synthesize_for_proving(circuit)
    vk = params.vk

    if prover.num_inputs != len(vk.ic) or prover.num_aux != len(params.l):
        raise SynthesisError(
            f"circuit shape ({prover.num_inputs} inputs, {prover.num_aux} aux) "
            f"does not match parameters ({len(vk.ic)} inputs, {len(params.l)} aux)"
        )

    unsatisfied = prover.unsatisfied_constraint()
    if unsatisfied is not None:
        raise SynthesisError(f"constraint {unsatisfied} is not satisfied by the assignment")

    m = len(params.h) + 1
    h = compute_h(prover.a, prover.b, prover.c, m)

    r = FR(rng.random_scalar(FR.field_modulus))
    s = FR(rng.random_scalar(FR.field_modulus))

    assignment = prover.input_assignment + prover.aux_assignment

    a_answer = msm(params.a, assignment)
    b_g1_answer = msm(params.b_g1, assignment)
    b_g2_answer = msm(params.b_g2, assignment)
    h_answer = msm(params.h, h)
    l_answer = msm(params.l, prover.aux_assignment)

    g_a = ec_add(ec_add(vk.alpha_g1, a_answer), ec_mul(vk.delta_g1, r))
    g_b = ec_add(ec_add(vk.beta_g2, b_g2_answer), ec_mul(vk.delta_g2, s))
    g_b1 = ec_add(ec_add(vk.beta_g1, b_g1_answer), ec_mul(vk.delta_g1, s))

    g_c = ec_add(h_answer, l_answer)
    g_c = ec_add(g_c, ec_mul(g_a, s))
    g_c = ec_add(g_c, ec_mul(g_b1, r))
    g_c = ec_add(g_c, ec_neg(ec_mul(vk.delta_g1, r * s)))

    logger.debug("groth16 proof created: %d constraints, domain %d", prover.num_constraints, m)
    return Proof(g_a, g_b, g_c)
