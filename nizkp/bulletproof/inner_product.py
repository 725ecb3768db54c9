"""
내적 인자 (Inner Product Argument)
==================================

벡터 a, b에 대해 P = <a, G> + <b, H'> + <a, b>·Q 를 알고 있음을 log₂(n) 라운드의
(L, R) 커밋먼트 쌍과 마지막 스칼라 a, b 두 개로 증명한다.

**접기(folding)**:
  매 라운드 챌린지 u를 받아
    a' = u·a_lo + u⁻¹·a_hi
    b' = u⁻¹·b_lo + u·b_hi
    G' = u⁻¹·G_lo + u·G_hi
    H' = u·H_lo + u⁻¹·H_hi
  로 길이를 절반으로 줄인다.

**검증 스칼라**:
  검증자는 접기를 직접 수행하지 않고, 최종 G/H 계수 s_i를 챌린지 곱으로 계산하여
  R1CS 검증의 단일 MSM에 합친다.
"""

from nizkp.ec import FR, compress_g1, decompress_g1, msm
from nizkp.errors import R1CSError


def inner_product(a, b):
    acc = FR(0)
    for x, y in zip(a, b):
        acc = acc + x * y
    return acc

class InnerProductProof:
    """속성: L_vec, R_vec (G1 점 리스트), a, b (FR)"""

    def __init__(self, L_vec, R_vec, a, b):
        self.L_vec = L_vec
        self.R_vec = R_vec
        self.a = a
        self.b = b

    @classmethod
    def create(cls, transcript, Q, G_factors, H_factors, G_vec, H_vec, a_vec, b_vec):
        """내적 증명을 생성한다.

        Args:
            transcript: Fiat-Shamir 트랜스크립트
            Q: <a, b> 항의 기저점
            G_factors, H_factors: 생성자에 곱해지는 스칼라 (R1CS에서는 1과 y^-i)
            G_vec, H_vec: 길이 n의 생성자 (n은 2의 거듭제곱)
            a_vec, b_vec: 길이 n의 FR 벡터
        """
        n = len(G_vec)
        if not (len(H_vec) == len(a_vec) == len(b_vec) == len(G_factors) == len(H_factors) == n):
            raise ValueError("inner product inputs must all have the same length")
        if n & (n - 1):
            raise ValueError(f"inner product length must be a power of two: {n}")

        transcript.innerproduct_domain_sep(n)

        G = list(G_vec)
        H = list(H_vec)
        a = list(a_vec)
        b = list(b_vec)
        L_vec = []
        R_vec = []

        # 첫 라운드에서만 G_factors/H_factors를 생성자에 흡수한다
        first = True
        while n != 1:
            n //= 2
            a_L, a_R = a[:n], a[n:]
            b_L, b_R = b[:n], b[n:]
            G_L, G_R = G[:n], G[n:]
            H_L, H_R = H[:n], H[n:]

            c_L = inner_product(a_L, b_R)
            c_R = inner_product(a_R, b_L)

            if first:
                gf_L, gf_R = G_factors[:n], G_factors[n:]
                hf_L, hf_R = H_factors[:n], H_factors[n:]
            else:
                gf_L = gf_R = hf_L = hf_R = [FR(1)] * n

            L = msm(
                G_R + H_L + [Q],
                [x * g for x, g in zip(a_L, gf_R)] + [y * h for y, h in zip(b_R, hf_L)] + [c_L],
            )
            R = msm(
                G_L + H_R + [Q],
                [x * g for x, g in zip(a_R, gf_L)] + [y * h for y, h in zip(b_L, hf_R)] + [c_R],
            )
            L_vec.append(L)
            R_vec.append(R)
            transcript.append_point(b"L", L)
            transcript.append_point(b"R", R)

            u = transcript.challenge_scalar(b"u")
            u_inv = FR(1) / u

            for i in range(n):
                a_L[i] = a_L[i] * u + u_inv * a_R[i]
                b_L[i] = b_L[i] * u_inv + u * b_R[i]
                G_L[i] = msm([G_L[i], G_R[i]], [u_inv * gf_L[i], u * gf_R[i]])
                H_L[i] = msm([H_L[i], H_R[i]], [u * hf_L[i], u_inv * hf_R[i]])

            a, b, G, H = a_L, b_L, G_L, H_L
            first = False

        return cls(L_vec, R_vec, a[0], b[0])

    def verification_scalars(self, n, transcript):
        """(u², u⁻², s)를 계산한다. 구조가 잘못되었으면 R1CSError."""
        lg_n = len(self.L_vec)
        if lg_n >= 32 or len(self.R_vec) != lg_n:
            raise R1CSError("inner product proof has malformed L/R vectors")
        if n != (1 << lg_n):
            raise R1CSError(f"inner product proof length mismatch: n={n}, rounds={lg_n}")

        transcript.innerproduct_domain_sep(n)

        challenges = []
        for L, R in zip(self.L_vec, self.R_vec):
            transcript.validate_and_append_point(b"L", L)
            transcript.validate_and_append_point(b"R", R)
            challenges.append(transcript.challenge_scalar(b"u"))

        challenges_inv = [FR(1) / u for u in challenges]
        all_inv = FR(1)
        for u_inv in challenges_inv:
            all_inv = all_inv * u_inv

        challenges_sq = [u * u for u in challenges]
        challenges_inv_sq = [u_inv * u_inv for u_inv in challenges_inv]

        # s_i = Π_j u_j^{±1}, 부호는 i의 비트로 결정된다
        s = [all_inv]
        for i in range(1, n):
            lg_i = i.bit_length() - 1
            k = 1 << lg_i
            u_lg_i_sq = challenges_sq[(lg_n - 1) - lg_i]
            s.append(s[i - k] * u_lg_i_sq)

        return challenges_sq, challenges_inv_sq, s

    def serialized_size(self):
        return len(self.L_vec) * 2 * 32 + 2 * 32

    def to_bytes(self):
        out = bytearray()
        for L, R in zip(self.L_vec, self.R_vec):
            out.extend(compress_g1(L))
            out.extend(compress_g1(R))
        out.extend(self.a.to_bytes())
        out.extend(self.b.to_bytes())
        return bytes(out)

    @classmethod
    def from_bytes(cls, data):
        if len(data) % 32 != 0 or len(data) < 64 or (len(data) // 32) % 2 != 0:
            raise R1CSError(f"inner product proof has invalid length {len(data)}")
        num_points = len(data) // 32 - 2
        L_vec, R_vec = [], []
        try:
            for i in range(0, num_points, 2):
                L_vec.append(decompress_g1(data[i * 32:(i + 1) * 32]))
                R_vec.append(decompress_g1(data[(i + 1) * 32:(i + 2) * 32]))
        except ValueError as e:
            raise R1CSError(f"inner product proof has an invalid point: {e}") from e
        pos = num_points * 32
        try:
            a = FR.from_bytes(data[pos:pos + 32])
            b = FR.from_bytes(data[pos + 32:pos + 64])
        except ValueError as e:
            raise R1CSError(f"inner product proof has an invalid scalar: {e}") from e
        return cls(L_vec, R_vec, a, b)
