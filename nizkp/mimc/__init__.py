"""
MiMC 라운드 순열 (참조 구현)
============================

세 가지 인코딩(R1CS 가젯, Groth16 회로, STARK AIR)이 모두 일치해야 하는 기준 함수.

라운드 i마다:
    xl' = xr + (xl + c_i)^3
    xr' = xl

R 라운드 후의 xl이 image이다. 덧셈과 곱셈만 쓰므로 FR, STARK BaseElement,
정수 등 어떤 필드 원소 타입에도 동작한다.

상수와 preimage는 하나의 SeededRng 스트림에서 이 순서로 뽑는다:
    c_0, ..., c_{R-1}, xl, xr
"""


def mimc(xl, xr, constants):
    for c in constants:
        tmp1 = xl + c
        tmp2 = tmp1 * tmp1 * tmp1
        new_xl = tmp2 + xr
        xr = xl
        xl = new_xl
    return xl


def generate_constants(rng, rounds, draw):
    """draw(rng) 호출로 필드 원소 R개를 뽑는다."""
    return [draw(rng) for _ in range(rounds)]


def generate_preimage(rng, draw):
    xl = draw(rng)
    xr = draw(rng)
    return xl, xr
