"""
BN254 곡선 기반 모듈: 스칼라 필드 FR 및 타원곡선 연산
=====================================================

bulletproof 백엔드(Pedersen 커밋먼트, 내적 인자)와 Groth16 백엔드(CRS, 페어링)가
공유하는 대수적 도구를 정의한다.

**유한체 FR**:
  bn128 곡선의 스칼라 필드. MiMC 라운드 상수, preimage, 블라인딩 팩터가 모두
  이 필드의 원소이다.

**타원곡선 연산**:
  py_ecc.optimized_bn128의 Jacobian 좌표 점을 그대로 사용한다.
  - G1: (FQ, FQ, FQ), 무한원점은 z == 0
  - G2: (FQ2, FQ2, FQ2)

**다중 스칼라 곱셈 (msm)**:
  Pippenger 버킷 방식. 검증 방정식 하나를 MSM 한 번으로 확인할 때 쓴다.

**점 압축**:
  G1은 32바이트, G2는 64바이트 (x 좌표 + 상위 비트 플래그).
  bn254의 p < 2^254이므로 최상위 두 비트가 비어 있다.
    0x80: y가 "큰 쪽" (y > (p-1)/2)
    0x40: 무한원점

사용 예시:
    >>> from nizkp.ec import FR, G1, ec_mul, compress_g1
    >>> P = ec_mul(G1, FR(5))
    >>> len(compress_g1(P))   # 32
"""

import hashlib

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import optimized_bn128 as bn128


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, ** 등의 필드 연산을 제공한다.

    예시:
        >>> FR(3) * FR(7)    # FR(21)
        >>> FR(1) / FR(3)    # 3의 모듈러 역원
    """
    field_modulus = bn128.curve_order

    # p - 1 = 2^28 × m (m은 홀수), 곱셈군 생성자 5
    TWO_ADICITY = 28
    GENERATOR = 5

    def __hash__(self):
        return hash(self.n)

    def to_bytes(self):
        """32바이트 리틀엔디안 표현."""
        return self.n.to_bytes(32, "little")

    @classmethod
    def from_bytes(cls, data):
        """32바이트 리틀엔디안 → FR. 모듈러스 이상의 값은 ValueError."""
        if len(data) != 32:
            raise ValueError(f"스칼라는 32바이트여야 합니다: {len(data)}")
        n = int.from_bytes(data, "little")
        if n >= cls.field_modulus:
            raise ValueError("스칼라가 정규형이 아닙니다 (>= 모듈러스)")
        return cls(n)


CURVE_ORDER = bn128.curve_order
FIELD_MODULUS = bn128.field_modulus

FQ1 = bn128.FQ
FQ2 = bn128.FQ2


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 상수 및 연산
# ─────────────────────────────────────────────────────────────────────

G1 = bn128.G1
G2 = bn128.G2
Z1 = bn128.Z1
Z2 = bn128.Z2


def is_inf(point):
    return bn128.is_inf(point)


def ec_mul(point, scalar):
    """타원곡선 스칼라 곱셈: scalar · point.

    scalar는 정수 또는 FR 원소이며, 음수도 CURVE_ORDER로 축소하여 처리한다.
    """
    return bn128.multiply(point, int(scalar) % CURVE_ORDER)


def ec_add(p1, p2):
    return bn128.add(p1, p2)


def ec_neg(point):
    return bn128.neg(point)


def ec_sub(p1, p2):
    return bn128.add(p1, bn128.neg(p2))


def ec_eq(p1, p2):
    """Jacobian 좌표의 점 비교. 무한원점끼리는 같다고 본다."""
    inf1, inf2 = is_inf(p1), is_inf(p2)
    if inf1 or inf2:
        return inf1 and inf2
    return bn128.eq(p1, p2)


def ec_sum(points):
    acc = None
    for p in points:
        acc = p if acc is None else bn128.add(acc, p)
    return acc


def _identity_like(point):
    return (point[0].one(), point[0].one(), point[0].zero())


def msm(points, scalars):
    """다중 스칼라 곱셈 Σ scalars[i] · points[i].

    항이 적으면 단순 합으로, 많으면 Pippenger 버킷 방식으로 계산한다.

    Args:
        points: 같은 그룹(G1 또는 G2)의 점 리스트 (비어 있으면 G1 무한원점)
        scalars: 정수 또는 FR 원소 리스트

    Returns:
        결과 점 (항이 모두 0이면 해당 그룹의 무한원점)
    """
    if len(points) != len(scalars):
        raise ValueError(f"points/scalars 길이 불일치: {len(points)} != {len(scalars)}")
    if not points:
        return Z1
    identity = _identity_like(points[0])

    pairs = []
    for p, s in zip(points, scalars):
        s = int(s) % CURVE_ORDER
        if s and not is_inf(p):
            pairs.append((p, s))
    if not pairs:
        return identity

    if len(pairs) < 16:
        acc = None
        for p, s in pairs:
            term = bn128.multiply(p, s)
            acc = term if acc is None else bn128.add(acc, term)
        return acc

    c = max(2, len(pairs).bit_length() - 2)
    mask = (1 << c) - 1
    num_windows = (CURVE_ORDER.bit_length() + c - 1) // c

    result = None
    for w in reversed(range(num_windows)):
        if result is not None:
            for _ in range(c):
                result = bn128.double(result)

        shift = w * c
        buckets = [None] * (mask + 1)
        for p, s in pairs:
            idx = (s >> shift) & mask
            if idx:
                b = buckets[idx]
                buckets[idx] = p if b is None else bn128.add(b, p)

        # Σ idx · bucket[idx] = running sum의 누적
        running = None
        window_sum = None
        for idx in range(mask, 0, -1):
            b = buckets[idx]
            if b is not None:
                running = b if running is None else bn128.add(running, b)
            if running is not None:
                window_sum = running if window_sum is None else bn128.add(window_sum, running)

        if window_sum is not None:
            result = window_sum if result is None else bn128.add(result, window_sum)

    return identity if result is None else result


def pairing(g2_point, g1_point):
    """최종 지수승까지 마친 페어링 e(g1, g2).

    주의: py_ecc의 인자 순서는 (G2, G1)이다.
    """
    return bn128.pairing(g2_point, g1_point)


def miller_loop(g2_point, g1_point):
    """최종 지수승 없이 Miller loop만 수행한다. 여러 페어링의 곱을 한 번에 확인할 때 쓴다."""
    return bn128.pairing(g2_point, g1_point, final_exponentiate=False)


def final_exponentiate(value):
    return bn128.final_exponentiate(value)


# ─────────────────────────────────────────────────────────────────────
# 제곱근
# ─────────────────────────────────────────────────────────────────────

def _sqrt_fq(a):
    """p ≡ 3 (mod 4)이므로 sqrt(a) = a^((p+1)/4). 제곱근이 없으면 None."""
    candidate = pow(int(a), (FIELD_MODULUS + 1) // 4, FIELD_MODULUS)
    if candidate * candidate % FIELD_MODULUS != int(a) % FIELD_MODULUS:
        return None
    return candidate


def _sqrt_fq2(a):
    """Fq2 = Fq[u]/(u² + 1)에서의 제곱근 (p ≡ 3 mod 4 전용 알고리즘)."""
    p = FIELD_MODULUS
    if a == FQ2.zero():
        return FQ2.zero()
    a1 = a ** ((p - 3) // 4)
    alpha = a1 * a1 * a
    a0 = (alpha ** p) * alpha
    minus_one = -FQ2.one()
    if a0 == minus_one:
        return None
    x0 = a1 * a
    if alpha == minus_one:
        x = FQ2([0, 1]) * x0
    else:
        b = (FQ2.one() + alpha) ** ((p - 1) // 2)
        x = b * x0
    if x * x != a:
        return None
    return x


def _is_larger_fq(y):
    return y > (FIELD_MODULUS - 1) // 2


def _is_larger_fq2(y):
    c0, c1 = (int(c) for c in y.coeffs)
    if c1 != 0:
        return _is_larger_fq(c1)
    return _is_larger_fq(c0)


# ─────────────────────────────────────────────────────────────────────
# 점 압축 / 복원
# ─────────────────────────────────────────────────────────────────────

FLAG_LARGER_Y = 0x80
FLAG_INFINITY = 0x40

G1_COMPRESSED_SIZE = 32
G2_COMPRESSED_SIZE = 64

# 아핀 좌표 그대로 (x ‖ y)
G1_UNCOMPRESSED_SIZE = 64
G2_UNCOMPRESSED_SIZE = 128


def compress_g1(point):
    """G1 점 → 32바이트 (빅엔디안 x + 플래그)."""
    if is_inf(point):
        out = bytearray(G1_COMPRESSED_SIZE)
        out[0] |= FLAG_INFINITY
        return bytes(out)
    x, y = bn128.normalize(point)
    out = bytearray(int(x).to_bytes(32, "big"))
    if _is_larger_fq(int(y)):
        out[0] |= FLAG_LARGER_Y
    return bytes(out)


def decompress_g1(data):
    """32바이트 → G1 점. 곡선 위에 있지 않으면 ValueError."""
    if len(data) != G1_COMPRESSED_SIZE:
        raise ValueError(f"G1 압축 표현은 32바이트여야 합니다: {len(data)}")
    flags = data[0] & 0xC0
    if flags & FLAG_INFINITY:
        return Z1
    x = int.from_bytes(bytes([data[0] & 0x3F]) + data[1:], "big")
    if x >= FIELD_MODULUS:
        raise ValueError("x 좌표가 필드 범위를 벗어났습니다")
    y = _sqrt_fq((x * x * x + 3) % FIELD_MODULUS)
    if y is None:
        raise ValueError("곡선 위의 점이 아닙니다")
    if _is_larger_fq(y) != bool(flags & FLAG_LARGER_Y):
        y = FIELD_MODULUS - y
    return (FQ1(x), FQ1(y), FQ1.one())


def compress_g2(point):
    """G2 점 → 64바이트 (x.c1 ‖ x.c0, 빅엔디안, 첫 바이트에 플래그)."""
    if is_inf(point):
        out = bytearray(G2_COMPRESSED_SIZE)
        out[0] |= FLAG_INFINITY
        return bytes(out)
    x, y = bn128.normalize(point)
    c0, c1 = (int(c) for c in x.coeffs)
    out = bytearray(c1.to_bytes(32, "big") + c0.to_bytes(32, "big"))
    if _is_larger_fq2(y):
        out[0] |= FLAG_LARGER_Y
    return bytes(out)


def decompress_g2(data):
    """64바이트 → G2 점. 곡선 밖이거나 소수 위수 부분군 밖이면 ValueError.

    bn254 G2는 cofactor가 1이 아니므로 r·P = O 를 확인한다.
    """
    if len(data) != G2_COMPRESSED_SIZE:
        raise ValueError(f"G2 압축 표현은 64바이트여야 합니다: {len(data)}")
    flags = data[0] & 0xC0
    if flags & FLAG_INFINITY:
        return Z2
    c1 = int.from_bytes(bytes([data[0] & 0x3F]) + data[1:32], "big")
    c0 = int.from_bytes(data[32:], "big")
    if c0 >= FIELD_MODULUS or c1 >= FIELD_MODULUS:
        raise ValueError("x 좌표가 필드 범위를 벗어났습니다")
    x = FQ2([c0, c1])
    y = _sqrt_fq2(x * x * x + bn128.b2)
    if y is None:
        raise ValueError("곡선 위의 점이 아닙니다")
    if _is_larger_fq2(y) != bool(flags & FLAG_LARGER_Y):
        y = -y
    point = (x, y, FQ2.one())
    if not bn128.is_inf(bn128.multiply(point, CURVE_ORDER)):
        raise ValueError("소수 위수 부분군의 점이 아닙니다")
    return point


# ─────────────────────────────────────────────────────────────────────
# 해시 → 곡선 (nothing-up-my-sleeve 생성자)
# ─────────────────────────────────────────────────────────────────────

def hash_to_g1(label, index=0):
    """try-and-increment 방식으로 이산로그를 아무도 모르는 G1 점을 만든다.

    bn254 G1은 cofactor가 1이므로 곡선 위의 모든 점이 소수 위수 부분군에 속한다.
    """
    counter = 0
    while True:
        h = hashlib.sha256(
            label + index.to_bytes(8, "little") + counter.to_bytes(4, "little")
        ).digest()
        x = int.from_bytes(h, "big") % FIELD_MODULUS
        y = _sqrt_fq((x * x * x + 3) % FIELD_MODULUS)
        if y is not None:
            return (FQ1(x), FQ1(y), FQ1.one())
        counter += 1
