"""
Bulletproof R1CS 제약 시스템
============================

곱셈 게이트 a_L ∘ a_R = a_O 와 선형 제약 W_L·a_L + W_R·a_R + W_O·a_O = W_V·v + c 로
이루어진 회로를 Pedersen 커밋먼트와 내적 인자로 증명한다 (단일 phase).

**Prover / Verifier 이중성**:
  두 클래스는 같은 ConstraintSystem 계약(multiply, allocate, constrain, metrics)을
  따른다. 가젯 코드는 어느 쪽이 들어오는지 모른 채 같은 순서로 게이트와 제약을
  만들며, Prover는 값을 함께 기록하고 Verifier는 토폴로지만 기록한다.

**변수 종류**:
  Committed(i)        : 커밋먼트 V_i로 고정된 외부 입력
  MultiplierLeft(i)   : i번째 곱셈 게이트의 왼쪽 입력
  MultiplierRight(i)  : 오른쪽 입력
  MultiplierOutput(i) : 출력
  One                 : 상수 1

**증명 흐름 (Prover.prove)**:
  1. A_I, A_O, S 커밋먼트 → 챌린지 y, z
  2. 제약을 z의 거듭제곱으로 평탄화하여 W_L, W_R, W_O, W_V 계산
  3. l(x), r(x) 벡터 다항식과 t(x) = <l(x), r(x)> 의 계수 커밋먼트 T_1, T_3..T_6
  4. 챌린지 x에서 t_x, 블라인딩 값, 내적 증명

**검증 (Verifier.verify)**:
  모든 등식을 검증자 난수 r로 묶어 하나의 MSM이 무한원점인지 확인한다.

사용 예시:
    >>> prover = Prover(pc_gens, Transcript(b"MiMCProof"), rng)
    >>> commitment, var = prover.commit(FR(5), FR(9))
    >>> _, _, o = prover.multiply(LinearCombination.from_var(var), LinearCombination.from_var(var))
    >>> proof = prover.prove(bp_gens)
"""

import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass

from nizkp.ec import (
    FR, compress_g1, decompress_g1, ec_mul, is_inf, msm, G1_COMPRESSED_SIZE,
)
from nizkp.errors import ConfigurationError, R1CSError
from nizkp.polynomial import next_power_of_two
from nizkp.rng import SeededRng
from nizkp.bulletproof.inner_product import InnerProductProof, inner_product

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# 변수와 선형결합
# ─────────────────────────────────────────────────────────────────────

class Variable:
    """제약 시스템의 변수 핸들."""

    COMMITTED = "committed"
    MULTIPLIER_LEFT = "multiplier_left"
    MULTIPLIER_RIGHT = "multiplier_right"
    MULTIPLIER_OUTPUT = "multiplier_output"
    ONE = "one"

    __slots__ = ("kind", "index")

    def __init__(self, kind, index=0):
        self.kind = kind
        self.index = index

    @classmethod
    def one(cls):
        return cls(cls.ONE)

    def __eq__(self, other):
        return isinstance(other, Variable) and (self.kind, self.index) == (other.kind, other.index)

    def __hash__(self):
        return hash((self.kind, self.index))

    def __repr__(self):
        if self.kind == self.ONE:
            return "Variable(one)"
        return f"Variable({self.kind}, {self.index})"

    def __add__(self, other):
        return LinearCombination.from_var(self) + other

    def __radd__(self, other):
        return LinearCombination.from_var(self) + other

    def __sub__(self, other):
        return LinearCombination.from_var(self) - other

    def __rsub__(self, other):
        return LinearCombination.of(other) - LinearCombination.from_var(self)

    def __neg__(self):
        return -LinearCombination.from_var(self)

    def __mul__(self, scalar):
        return LinearCombination.from_var(self) * scalar

    def __rmul__(self, scalar):
        return LinearCombination.from_var(self) * scalar


class LinearCombination:
    """Σ coeff_i · var_i. terms는 (Variable, FR) 튜플 리스트."""

    def __init__(self, terms=None):
        self.terms = list(terms) if terms else []

    @classmethod
    def from_var(cls, var):
        return cls([(var, FR(1))])

    @classmethod
    def of(cls, value):
        """Variable, 스칼라(int/FR), LinearCombination 중 무엇이든 선형결합으로 바꾼다."""
        if isinstance(value, LinearCombination):
            return value
        if isinstance(value, Variable):
            return cls.from_var(value)
        return cls([(Variable.one(), FR(value))])

    def __add__(self, other):
        return LinearCombination(self.terms + LinearCombination.of(other).terms)

    def __radd__(self, other):
        return LinearCombination.of(other) + self

    def __sub__(self, other):
        return self + (-LinearCombination.of(other))

    def __rsub__(self, other):
        return LinearCombination.of(other) - self

    def __neg__(self):
        return LinearCombination([(v, -c) for v, c in self.terms])

    def __mul__(self, scalar):
        s = FR(scalar)
        return LinearCombination([(v, c * s) for v, c in self.terms])

    def __rmul__(self, scalar):
        return self * scalar

    def __repr__(self):
        return f"LinearCombination({self.terms!r})"


@dataclass
class R1CSMetrics:
    """제약 시스템 크기."""
    multipliers: int
    constraints: int


# ─────────────────────────────────────────────────────────────────────
# 공통 계약
# ─────────────────────────────────────────────────────────────────────

class ConstraintSystem(ABC):
    """Prover와 Verifier가 공유하는 제약 싱크."""

    def __init__(self, transcript):
        self.transcript = transcript
        self.num_vars = 0
        self.constraints = []
        transcript.r1cs_domain_sep()

    @abstractmethod
    def multiply(self, left, right):
        """왼쪽/오른쪽 선형결합을 곱셈 게이트에 연결하고 (left, right, output) 변수를 반환한다."""

    @abstractmethod
    def allocate(self, assignment=None):
        """값이 하나뿐인 새 곱셈 게이트 변수를 할당한다 (오른쪽 입력 0)."""

    def constrain(self, lc):
        """lc == 0 제약을 추가한다."""
        self.constraints.append(LinearCombination.of(lc))

    def metrics(self):
        return R1CSMetrics(multipliers=self.num_vars, constraints=len(self.constraints))

    def _gate_constraints(self, left, right, l_var, r_var):
        self.constrain(left - l_var)
        self.constrain(right - r_var)

    def _flattened_constraints(self, z, num_committed):
        """제약을 z, z², ... 로 묶어 (wL, wR, wO, wV, wc) 벡터로 평탄화한다."""
        n = self.num_vars
        wL = [FR(0)] * n
        wR = [FR(0)] * n
        wO = [FR(0)] * n
        wV = [FR(0)] * num_committed
        wc = FR(0)

        exp_z = z
        for lc in self.constraints:
            for var, coeff in lc.terms:
                if var.kind == Variable.MULTIPLIER_LEFT:
                    wL[var.index] = wL[var.index] + exp_z * coeff
                elif var.kind == Variable.MULTIPLIER_RIGHT:
                    wR[var.index] = wR[var.index] + exp_z * coeff
                elif var.kind == Variable.MULTIPLIER_OUTPUT:
                    wO[var.index] = wO[var.index] + exp_z * coeff
                elif var.kind == Variable.COMMITTED:
                    wV[var.index] = wV[var.index] - exp_z * coeff
                else:
                    wc = wc - exp_z * coeff
            exp_z = exp_z * z

        return wL, wR, wO, wV, wc


def _check_capacity(bp_gens, padded_n):
    if bp_gens.gens_capacity < padded_n:
        raise ConfigurationError(
            f"bulletproof generators too small: capacity {bp_gens.gens_capacity} < {padded_n}"
        )


# ─────────────────────────────────────────────────────────────────────
# 증명
# ─────────────────────────────────────────────────────────────────────

class R1CSProof:
    """단일 phase R1CS 증명.

    속성:
        A_I1, A_O1, S1: 게이트 입력/출력/블라인딩 벡터 커밋먼트
        T_1, T_3, T_4, T_5, T_6: t(x) 계수 커밋먼트 (t_0=0, t_2는 V로부터 계산)
        t_x, t_x_blinding, e_blinding: x에서의 평가값과 블라인딩
        ipp_proof: 내적 증명
    """

    NUM_POINTS = 8
    NUM_SCALARS = 3

    def __init__(self, A_I1, A_O1, S1, T_1, T_3, T_4, T_5, T_6,
                 t_x, t_x_blinding, e_blinding, ipp_proof):
        self.A_I1 = A_I1
        self.A_O1 = A_O1
        self.S1 = S1
        self.T_1 = T_1
        self.T_3 = T_3
        self.T_4 = T_4
        self.T_5 = T_5
        self.T_6 = T_6
        self.t_x = t_x
        self.t_x_blinding = t_x_blinding
        self.e_blinding = e_blinding
        self.ipp_proof = ipp_proof

    def points(self):
        return [self.A_I1, self.A_O1, self.S1, self.T_1, self.T_3, self.T_4, self.T_5, self.T_6]

    def serialized_size(self):
        return self.NUM_POINTS * 32 + self.NUM_SCALARS * 32 + self.ipp_proof.serialized_size()

    def to_bytes(self):
        out = bytearray()
        for p in self.points():
            out.extend(compress_g1(p))
        for s in (self.t_x, self.t_x_blinding, self.e_blinding):
            out.extend(s.to_bytes())
        out.extend(self.ipp_proof.to_bytes())
        return bytes(out)

    @classmethod
    def from_bytes(cls, data):
        head = cls.NUM_POINTS * 32 + cls.NUM_SCALARS * 32
        if len(data) < head:
            raise R1CSError(f"R1CS proof too short: {len(data)} bytes")
        try:
            points = [decompress_g1(data[i * 32:(i + 1) * 32]) for i in range(cls.NUM_POINTS)]
        except ValueError as e:
            raise R1CSError(f"R1CS proof has an invalid point: {e}") from e
        pos = cls.NUM_POINTS * 32
        try:
            scalars = [FR.from_bytes(data[pos + i * 32:pos + (i + 1) * 32]) for i in range(cls.NUM_SCALARS)]
        except ValueError as e:
            raise R1CSError(f"R1CS proof has an invalid scalar: {e}") from e
        ipp = InnerProductProof.from_bytes(data[head:])
        return cls(*points, *scalars, ipp)


def _vec_poly_eval(coeffs, x):
    """벡터 다항식 Σ coeffs[k] x^k 평가 (coeffs[k]는 None이면 0 벡터)."""
    n = next(len(c) for c in coeffs if c is not None)
    out = [FR(0)] * n
    x_k = FR(1)
    for c in coeffs:
        if c is not None:
            for i in range(n):
                out[i] = out[i] + c[i] * x_k
        x_k = x_k * x
    return out


# ─────────────────────────────────────────────────────────────────────
# Prover
# ─────────────────────────────────────────────────────────────────────

class Prover(ConstraintSystem):
    """witness 값을 가진 제약 시스템."""

    def __init__(self, pc_gens, transcript, rng=None):
        super().__init__(transcript)
        self.pc_gens = pc_gens
        self.rng = rng if rng is not None else SeededRng(secrets.token_bytes(32))
        self.v = []
        self.v_blinding = []
        self.a_L = []
        self.a_R = []
        self.a_O = []

    def commit(self, v, v_blinding):
        """값 v를 커밋하고 (압축된 커밋먼트, Committed 변수)를 반환한다."""
        i = len(self.v)
        self.v.append(FR(v))
        self.v_blinding.append(FR(v_blinding))
        V = compress_g1(self.pc_gens.commit(v, v_blinding))
        self.transcript.append_point(b"V", V)
        return V, Variable(Variable.COMMITTED, i)

    def eval(self, lc):
        acc = FR(0)
        for var, coeff in LinearCombination.of(lc).terms:
            if var.kind == Variable.COMMITTED:
                val = self.v[var.index]
            elif var.kind == Variable.MULTIPLIER_LEFT:
                val = self.a_L[var.index]
            elif var.kind == Variable.MULTIPLIER_RIGHT:
                val = self.a_R[var.index]
            elif var.kind == Variable.MULTIPLIER_OUTPUT:
                val = self.a_O[var.index]
            else:
                val = FR(1)
            acc = acc + coeff * val
        return acc

    def multiply(self, left, right):
        left = LinearCombination.of(left)
        right = LinearCombination.of(right)
        l = self.eval(left)
        r = self.eval(right)
        i = self.num_vars
        self.a_L.append(l)
        self.a_R.append(r)
        self.a_O.append(l * r)
        self.num_vars += 1

        l_var = Variable(Variable.MULTIPLIER_LEFT, i)
        r_var = Variable(Variable.MULTIPLIER_RIGHT, i)
        o_var = Variable(Variable.MULTIPLIER_OUTPUT, i)
        self._gate_constraints(left, right, l_var, r_var)
        return l_var, r_var, o_var

    def allocate(self, assignment=None):
        if assignment is None:
            raise R1CSError("prover must supply an assignment")
        i = self.num_vars
        self.a_L.append(FR(assignment))
        self.a_R.append(FR(0))
        self.a_O.append(FR(0))
        self.num_vars += 1
        return Variable(Variable.MULTIPLIER_LEFT, i)

    def _random_scalar(self):
        return FR(self.rng.random_scalar(FR.field_modulus))

    def prove(self, bp_gens):
        """R1CSProof를 생성한다. 생성자 용량이 부족하면 ConfigurationError."""
        transcript = self.transcript
        transcript.append_u64(b"m", len(self.v))

        n = self.num_vars
        padded_n = next_power_of_two(n)
        _check_capacity(bp_gens, padded_n)
        gens = bp_gens.share(0)
        G = gens.G(padded_n)
        H = gens.H(padded_n)
        B = self.pc_gens.B
        B_blinding = self.pc_gens.B_blinding

        i_blinding = self._random_scalar()
        o_blinding = self._random_scalar()
        s_blinding = self._random_scalar()
        s_L = [self._random_scalar() for _ in range(n)]
        s_R = [self._random_scalar() for _ in range(n)]

        A_I1 = msm([B_blinding] + G[:n] + H[:n], [i_blinding] + self.a_L + self.a_R)
        A_O1 = msm([B_blinding] + G[:n], [o_blinding] + self.a_O)
        S1 = msm([B_blinding] + G[:n] + H[:n], [s_blinding] + s_L + s_R)

        transcript.append_point(b"A_I1", A_I1)
        transcript.append_point(b"A_O1", A_O1)
        transcript.append_point(b"S1", S1)
        transcript.r1cs_1phase_domain_sep()

        y = transcript.challenge_scalar(b"y")
        z = transcript.challenge_scalar(b"z")

        wL, wR, wO, wV, _ = self._flattened_constraints(z, len(self.v))

        y_inv = FR(1) / y
        exp_y_inv = []
        cur = FR(1)
        for _ in range(padded_n):
            exp_y_inv.append(cur)
            cur = cur * y_inv

        l1, l2, l3 = [None] * n, list(self.a_O), list(s_L)
        r0, r1, r3 = [None] * n, [None] * n, [None] * n
        exp_y = FR(1)
        for i in range(n):
            l1[i] = self.a_L[i] + exp_y_inv[i] * wR[i]
            r0[i] = wO[i] - exp_y
            r1[i] = exp_y * self.a_R[i] + wL[i]
            r3[i] = exp_y * s_R[i]
            exp_y = exp_y * y

        # t(x) = <l(x), r(x)>, l_0 = 0, r_2 = 0
        t1 = inner_product(l1, r0)
        t2 = inner_product(l1, r1) + inner_product(l2, r0)
        t3 = inner_product(l2, r1) + inner_product(l3, r0)
        t4 = inner_product(l1, r3) + inner_product(l3, r1)
        t5 = inner_product(l2, r3)
        t6 = inner_product(l3, r3)

        t_1_blinding = self._random_scalar()
        t_3_blinding = self._random_scalar()
        t_4_blinding = self._random_scalar()
        t_5_blinding = self._random_scalar()
        t_6_blinding = self._random_scalar()

        T_1 = self.pc_gens.commit(t1, t_1_blinding)
        T_3 = self.pc_gens.commit(t3, t_3_blinding)
        T_4 = self.pc_gens.commit(t4, t_4_blinding)
        T_5 = self.pc_gens.commit(t5, t_5_blinding)
        T_6 = self.pc_gens.commit(t6, t_6_blinding)

        transcript.append_point(b"T_1", T_1)
        transcript.append_point(b"T_3", T_3)
        transcript.append_point(b"T_4", T_4)
        transcript.append_point(b"T_5", T_5)
        transcript.append_point(b"T_6", T_6)

        x = transcript.challenge_scalar(b"x")

        t_2_blinding = inner_product(wV, self.v_blinding)
        t_poly = [FR(0), t1, t2, t3, t4, t5, t6]
        t_blinding_poly = [FR(0), t_1_blinding, t_2_blinding, t_3_blinding,
                           t_4_blinding, t_5_blinding, t_6_blinding]
        t_x = _scalar_poly_eval(t_poly, x)
        t_x_blinding = _scalar_poly_eval(t_blinding_poly, x)

        l_vec = _vec_poly_eval([None, l1, l2, l3], x)
        r_vec = _vec_poly_eval([r0, r1, None, r3], x)
        # 패딩 게이트: a = 0, wO = 0 이므로 r_0 = -y^i
        for _ in range(n, padded_n):
            l_vec.append(FR(0))
            r_vec.append(-exp_y)
            exp_y = exp_y * y

        e_blinding = x * (i_blinding + x * (o_blinding + x * s_blinding))

        transcript.append_scalar(b"t_x", t_x)
        transcript.append_scalar(b"t_x_blinding", t_x_blinding)
        transcript.append_scalar(b"e_blinding", e_blinding)

        w = transcript.challenge_scalar(b"w")
        Q = ec_mul(B, w)

        ipp_proof = InnerProductProof.create(
            transcript, Q, [FR(1)] * padded_n, exp_y_inv, G, H, l_vec, r_vec,
        )

        logger.debug("R1CS proof created: %d multipliers (padded %d), %d constraints",
                     n, padded_n, len(self.constraints))
        return R1CSProof(A_I1, A_O1, S1, T_1, T_3, T_4, T_5, T_6,
                         t_x, t_x_blinding, e_blinding, ipp_proof)


def _scalar_poly_eval(coeffs, x):
    acc = FR(0)
    for c in reversed(coeffs):
        acc = acc * x + c
    return acc


# ─────────────────────────────────────────────────────────────────────
# Verifier
# ─────────────────────────────────────────────────────────────────────

class Verifier(ConstraintSystem):
    """witness 없이 제약 토폴로지만 기록하는 제약 시스템."""

    def __init__(self, transcript):
        super().__init__(transcript)
        self.V = []

    def commit(self, commitment):
        """Prover가 보낸 압축 커밋먼트(32바이트)를 받아 Committed 변수를 반환한다."""
        commitment = bytes(commitment)
        if len(commitment) != G1_COMPRESSED_SIZE:
            raise R1CSError(f"commitment must be {G1_COMPRESSED_SIZE} bytes")
        i = len(self.V)
        self.V.append(commitment)
        self.transcript.append_point(b"V", commitment)
        return Variable(Variable.COMMITTED, i)

    def multiply(self, left, right):
        i = self.num_vars
        self.num_vars += 1
        l_var = Variable(Variable.MULTIPLIER_LEFT, i)
        r_var = Variable(Variable.MULTIPLIER_RIGHT, i)
        o_var = Variable(Variable.MULTIPLIER_OUTPUT, i)
        self._gate_constraints(LinearCombination.of(left), LinearCombination.of(right), l_var, r_var)
        return l_var, r_var, o_var

    def allocate(self, assignment=None):
        i = self.num_vars
        self.num_vars += 1
        return Variable(Variable.MULTIPLIER_LEFT, i)

    def verify(self, proof, pc_gens, bp_gens):
        """증명을 검증한다.

        Returns:
            bool: 수락 여부. 잘못된 구조의 증명도 False로 처리한다.

        Raises:
            ConfigurationError: 생성자 용량이 패딩된 게이트 수보다 작을 때
        """
        padded_n = next_power_of_two(self.num_vars)
        _check_capacity(bp_gens, padded_n)
        try:
            return self._verify(proof, pc_gens, bp_gens, padded_n)
        except R1CSError as e:
            logger.info("R1CS proof rejected: %s", e)
            return False

    def _verify(self, proof, pc_gens, bp_gens, padded_n):
        transcript = self.transcript
        transcript.append_u64(b"m", len(self.V))

        n = self.num_vars
        try:
            V_points = [decompress_g1(v) for v in self.V]
        except ValueError as e:
            raise R1CSError(f"invalid commitment: {e}") from e

        transcript.validate_and_append_point(b"A_I1", proof.A_I1)
        transcript.validate_and_append_point(b"A_O1", proof.A_O1)
        transcript.validate_and_append_point(b"S1", proof.S1)
        transcript.r1cs_1phase_domain_sep()

        y = transcript.challenge_scalar(b"y")
        z = transcript.challenge_scalar(b"z")

        transcript.validate_and_append_point(b"T_1", proof.T_1)
        transcript.validate_and_append_point(b"T_3", proof.T_3)
        transcript.validate_and_append_point(b"T_4", proof.T_4)
        transcript.validate_and_append_point(b"T_5", proof.T_5)
        transcript.validate_and_append_point(b"T_6", proof.T_6)

        x = transcript.challenge_scalar(b"x")

        transcript.append_scalar(b"t_x", proof.t_x)
        transcript.append_scalar(b"t_x_blinding", proof.t_x_blinding)
        transcript.append_scalar(b"e_blinding", proof.e_blinding)

        w = transcript.challenge_scalar(b"w")

        wL, wR, wO, wV, wc = self._flattened_constraints(z, len(self.V))

        u_sq, u_inv_sq, s = proof.ipp_proof.verification_scalars(padded_n, transcript)
        a = proof.ipp_proof.a
        b = proof.ipp_proof.b

        # 검증자 난수: 여러 등식을 하나의 MSM으로 묶는다
        r = FR(secrets.randbelow(FR.field_modulus - 1) + 1)

        xx = x * x
        rxx = r * xx
        xxx = x * xx

        y_inv = FR(1) / y
        y_inv_vec = []
        cur = FR(1)
        for _ in range(padded_n):
            y_inv_vec.append(cur)
            cur = cur * y_inv

        zero_pad = [FR(0)] * (padded_n - n)
        yneg_wR = [wR[i] * y_inv_vec[i] for i in range(n)] + zero_pad
        wL = wL + zero_pad
        wO = wO + zero_pad
        delta = inner_product(yneg_wR[:n], wL[:n])

        g_scalars = [x * yneg_wR[i] - a * s[i] for i in range(padded_n)]
        h_scalars = [
            y_inv_vec[i] * (x * wL[i] + wO[i] - b * s[padded_n - 1 - i]) - FR(1)
            for i in range(padded_n)
        ]

        gens = bp_gens.share(0)
        points = (
            [proof.A_I1, proof.A_O1, proof.S1]
            + V_points
            + [proof.T_1, proof.T_3, proof.T_4, proof.T_5, proof.T_6]
            + [pc_gens.B, pc_gens.B_blinding]
            + gens.G(padded_n)
            + gens.H(padded_n)
            + proof.ipp_proof.L_vec
            + proof.ipp_proof.R_vec
        )
        scalars = (
            [x, xx, xxx]
            + [wV_i * rxx for wV_i in wV]
            + [r * x, rxx * x, rxx * xx, rxx * xxx, rxx * xx * xx]
            + [w * (proof.t_x - a * b) + r * (xx * (wc + delta) - proof.t_x),
               -proof.e_blinding - r * proof.t_x_blinding]
            + g_scalars
            + h_scalars
            + u_sq
            + u_inv_sq
        )

        mega_check = msm(points, scalars)
        if not is_inf(mega_check):
            raise R1CSError("verification equation does not hold")
        return True
