"""
Groth16 파라미터 생성 (CRS)
===========================

toxic waste α, β, γ, δ, τ를 rng에서 뽑아 회로 하나에 대한 증명키/검증키를 만든다.

**QAP 평가**:
  도메인 크기 m은 제약 수 이상의 최소 2의 거듭제곱.
  [τ^0, ..., τ^{m-1}]을 IFFT하면 Lagrange 기저의 τ 평가값 L_j(τ)가 된다.
  변수 i에 대해 u_i(τ) = Σ coeff · L_j(τ) (A), v_i(τ) (B), w_i(τ) (C).

**증명키 (Parameters)**:
  a[i]    = u_i(τ)·G1
  b_g1[i] = v_i(τ)·G1, b_g2[i] = v_i(τ)·G2
  l[j]    = (β·u_j + α·v_j + w_j)(τ)/δ · G1   (비공개 변수)
  h[i]    = τ^i · Z(τ)/δ · G1,  i < m-1      (Z(x) = x^m - 1)

**검증키 (VerifyingKey)**:
  α·G1, β·G1, β·G2, γ·G2, δ·G1, δ·G2
  ic[i] = (β·u_i + α·v_i + w_i)(τ)/γ · G1      (공개 입력, ONE 포함)
"""

import logging

from nizkp.ec import (
    FR, G1, G2, compress_g1, compress_g2, ec_mul, ec_neg, pairing,
    G1_COMPRESSED_SIZE, G2_COMPRESSED_SIZE, G1_UNCOMPRESSED_SIZE, G2_UNCOMPRESSED_SIZE,
)
from nizkp.polynomial import get_root_of_unity, ifft, next_power_of_two, powers
from nizkp.groth16.constraint_system import synthesize_for_setup

logger = logging.getLogger(__name__)


def _point_sizes(compressed):
    if compressed:
        return G1_COMPRESSED_SIZE, G2_COMPRESSED_SIZE
    return G1_UNCOMPRESSED_SIZE, G2_UNCOMPRESSED_SIZE


class VerifyingKey:
    def __init__(self, alpha_g1, beta_g1, beta_g2, gamma_g2, delta_g1, delta_g2, ic):
        self.alpha_g1 = alpha_g1
        self.beta_g1 = beta_g1
        self.beta_g2 = beta_g2
        self.gamma_g2 = gamma_g2
        self.delta_g1 = delta_g1
        self.delta_g2 = delta_g2
        self.ic = ic

    def serialized_size(self, compressed=True):
        g1, g2 = _point_sizes(compressed)
        return 3 * g1 + 3 * g2 + len(self.ic) * g1

    def to_bytes(self):
        out = bytearray()
        out += compress_g1(self.alpha_g1)
        out += compress_g1(self.beta_g1)
        out += compress_g2(self.beta_g2)
        out += compress_g2(self.gamma_g2)
        out += compress_g1(self.delta_g1)
        out += compress_g2(self.delta_g2)
        for p in self.ic:
            out += compress_g1(p)
        return bytes(out)


class PreparedVerifyingKey:
    """e(α, β)를 미리 계산하고 γ, δ를 음수로 저장한 검증키."""

    def __init__(self, alpha_g1_beta_g2, neg_gamma_g2, neg_delta_g2, ic):
        self.alpha_g1_beta_g2 = alpha_g1_beta_g2
        self.neg_gamma_g2 = neg_gamma_g2
        self.neg_delta_g2 = neg_delta_g2
        self.ic = ic


class Parameters:
    def __init__(self, vk, h, l, a, b_g1, b_g2):
        self.vk = vk
        self.h = h
        self.l = l
        self.a = a
        self.b_g1 = b_g1
        self.b_g2 = b_g2

    def serialized_size_without_vk(self, compressed=True):
        g1, g2 = _point_sizes(compressed)
        g1_points = len(self.h) + len(self.l) + len(self.a) + len(self.b_g1)
        return g1_points * g1 + len(self.b_g2) * g2


def prepare_verifying_key(vk):
    return PreparedVerifyingKey(
        pairing(vk.beta_g2, vk.alpha_g1),
        ec_neg(vk.gamma_g2),
        ec_neg(vk.delta_g2),
        vk.ic,
    )


def _random_nonzero(rng):
    return FR(rng.random_nonzero(FR.field_modulus))


def _evaluate_at_tau(terms, lagrange):
    acc = FR(0)
    for coeff, j in terms:
        acc = acc + coeff * lagrange[j]
    return acc


def generate_parameters(circuit, rng):
    """회로를 witness 없이 합성하여 Parameters를 만든다.

    toxic waste는 α, β, γ, δ, τ 순서로 rng에서 뽑는다.
    """
    alpha = _random_nonzero(rng)
    beta = _random_nonzero(rng)
    gamma = _random_nonzero(rng)
    delta = _random_nonzero(rng)
    tau = _random_nonzero(rng)

    assembly = synthesize_for_setup(circuit)

    m = max(2, next_power_of_two(assembly.num_constraints))
    omega = get_root_of_unity(FR, m)
    lagrange = ifft(powers(tau, m), omega)

    z_tau = tau ** m - FR(1)
    if z_tau == FR(0):
        raise ValueError("tau landed on the evaluation domain")

    gamma_inv = FR(1) / gamma
    delta_inv = FR(1) / delta

    # h query: τ^i Z(τ) / δ, i = 0..m-2
    coeff = z_tau * delta_inv
    h = [ec_mul(G1, t * coeff) for t in powers(tau, m - 1)]

    def evaluate(at, bt, ct):
        a_vals = [_evaluate_at_tau(t, lagrange) for t in at]
        b_vals = [_evaluate_at_tau(t, lagrange) for t in bt]
        c_vals = [_evaluate_at_tau(t, lagrange) for t in ct]
        return a_vals, b_vals, c_vals

    a_in, b_in, c_in = evaluate(assembly.at_inputs, assembly.bt_inputs, assembly.ct_inputs)
    a_aux, b_aux, c_aux = evaluate(assembly.at_aux, assembly.bt_aux, assembly.ct_aux)

    ic = [
        ec_mul(G1, (beta * u + alpha * v + w) * gamma_inv)
        for u, v, w in zip(a_in, b_in, c_in)
    ]
    l = [
        ec_mul(G1, (beta * u + alpha * v + w) * delta_inv)
        for u, v, w in zip(a_aux, b_aux, c_aux)
    ]

    a_all = a_in + a_aux
    b_all = b_in + b_aux
    a = [ec_mul(G1, u) for u in a_all]
    b_g1 = [ec_mul(G1, v) for v in b_all]
    b_g2 = [ec_mul(G2, v) for v in b_all]

    vk = VerifyingKey(
        alpha_g1=ec_mul(G1, alpha),
        beta_g1=ec_mul(G1, beta),
        beta_g2=ec_mul(G2, beta),
        gamma_g2=ec_mul(G2, gamma),
        delta_g1=ec_mul(G1, delta),
        delta_g2=ec_mul(G2, delta),
        ic=ic,
    )

    logger.info(
        "groth16 parameters: %d constraints, domain %d, %d inputs, %d aux",
        assembly.num_constraints, m, assembly.num_inputs, assembly.num_aux,
    )
    return Parameters(vk, h, l, a, b_g1, b_g2)
