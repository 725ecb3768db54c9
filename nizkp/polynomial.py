"""
다항식 유틸리티: radix-2 FFT와 코셋 평가
=========================================

Groth16(FR, bn254 스칼라 필드)과 STARK(f128 기본 필드)가 함께 쓰는 모듈이다.
필드 클래스는 다음 속성을 가져야 한다.

  TWO_ADICITY: p - 1 = 2^s × m 의 s
  GENERATOR:   2-adic 단위근을 유도할 곱셈군 원소 (비이차잉여)

**FFT/IFFT**:
  계수 → 단위근 도메인 평가값 / 역변환. 재귀적 Cooley-Tukey.

**코셋 FFT**:
  도메인 {g·ω^i}에서의 평가. Groth16의 H(x) 계산과 STARK의 LDE에 쓰인다.

사용 예시:
    >>> omega = get_root_of_unity(FR, 8)
    >>> evals = fft([FR(1), FR(2)] + [FR(0)] * 6, omega)
"""


def is_power_of_two(n):
    return n > 0 and n & (n - 1) == 0


def next_power_of_two(n):
    p = 1
    while p < n:
        p <<= 1
    return p


def get_root_of_unity(field, n):
    """필드 field의 n차 원시 단위근 ω.

    Raises:
        ValueError: n이 2의 거듭제곱이 아니거나 2^TWO_ADICITY를 초과할 때
    """
    if not is_power_of_two(n):
        raise ValueError(f"n은 2의 거듭제곱이어야 합니다: {n}")
    if n > (1 << field.TWO_ADICITY):
        raise ValueError(f"n은 2^{field.TWO_ADICITY} 이하여야 합니다: {n}")
    root = field(field.GENERATOR) ** ((field.field_modulus - 1) >> field.TWO_ADICITY)
    return root ** ((1 << field.TWO_ADICITY) // n)


def powers(base, count):
    """[1, base, base², ..., base^(count-1)]"""
    out = []
    cur = type(base).one()
    for _ in range(count):
        out.append(cur)
        cur = cur * base
    return out


def fft(coeffs, omega):
    """계수 → 평가값 [p(1), p(ω), ..., p(ω^{n-1})]. len(coeffs)는 2의 거듭제곱."""
    n = len(coeffs)
    if n == 1:
        return [coeffs[0]]

    even_vals = fft(coeffs[0::2], omega * omega)
    odd_vals = fft(coeffs[1::2], omega * omega)

    result = [None] * n
    omega_k = type(omega).one()
    half = n // 2
    for k in range(half):
        t = omega_k * odd_vals[k]
        result[k] = even_vals[k] + t
        result[k + half] = even_vals[k] - t
        omega_k = omega_k * omega
    return result


def ifft(evals, omega):
    """평가값 → 계수. ω^{-1}로 FFT한 뒤 n으로 나눈다."""
    field = type(omega)
    n = len(evals)
    coeffs = fft(evals, field.one() / omega)
    n_inv = field.one() / field(n)
    return [c * n_inv for c in coeffs]


def coset_fft(coeffs, omega, offset):
    """도메인 {offset·ω^i}에서의 평가값."""
    return fft([c * s for c, s in zip(coeffs, powers(offset, len(coeffs)))], omega)


def coset_ifft(evals, omega, offset):
    coeffs = ifft(evals, omega)
    inv = type(offset).one() / offset
    return [c * s for c, s in zip(coeffs, powers(inv, len(coeffs)))]


def evaluate(coeffs, x):
    """Horner 방식 평가. x가 확장체 원소여도 계수는 기본 필드 원소일 수 있다."""
    acc = x * 0
    for c in reversed(coeffs):
        acc = acc * x + c
    return acc


def pad(values, n, zero):
    return list(values) + [zero] * (n - len(values))
