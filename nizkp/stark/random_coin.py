"""
Fiat-Shamir 랜덤 코인
=====================

  seed    ← hash(공개 입력과 증명 문맥)
  reseed  : seed ← merge(seed, 커밋먼트), counter ← 0
  draw    : hash(seed ‖ counter)에서 필드 원소를 뽑는다 (p 이상이면 다시 뽑음)

grinding: merge_with_int(seed, nonce)의 앞 8바이트(u64, little endian)의 선행
0 비트 수가 grinding_factor 이상이어야 한다.
"""

import struct

from nizkp.stark.field import BaseElement, MODULUS, elements_to_bytes


class RandomCoin:
    def __init__(self, hasher, seed_data):
        self.hasher = hasher
        self.seed = hasher.hash(seed_data)
        self.counter = 0

    def reseed(self, data):
        if len(data) != self.hasher.DIGEST_SIZE:
            data = self.hasher.hash(data)
        self.seed = self.hasher.merge(self.seed, data)
        self.counter = 0

    def reseed_with_int(self, value):
        self.seed = self.hasher.merge_with_int(self.seed, value)
        self.counter = 0

    def _next(self):
        self.counter += 1
        return self.hasher.merge_with_int(self.seed, self.counter)

    def draw_base(self):
        while True:
            value = int.from_bytes(self._next()[:16], "little")
            if value < MODULUS:
                return BaseElement(value)

    def draw(self, field):
        """field(BaseElement 또는 QuadExtElement) 원소 하나."""
        return field.from_base_elements([self.draw_base() for _ in range(field.EXTENSION_DEGREE)])

    def draw_pair(self, field):
        return self.draw(field), self.draw(field)

    def leading_zeros(self, nonce):
        digest = self.hasher.merge_with_int(self.seed, nonce)
        value = int.from_bytes(digest[:8], "little")
        return 64 - value.bit_length()

    def check_leading_zeros(self, nonce, grinding_factor):
        return self.leading_zeros(nonce) >= grinding_factor

    def draw_integers(self, num_values, domain_size, nonce):
        """nonce로 재시드한 뒤 [0, domain_size) 위치 num_values개. 중복은 제거하고 정렬한다."""
        if domain_size & (domain_size - 1):
            raise ValueError(f"domain size must be a power of two: {domain_size}")
        self.reseed_with_int(nonce)
        mask = domain_size - 1
        values = set()
        for _ in range(num_values):
            values.add(int.from_bytes(self._next()[:8], "little") & mask)
        return sorted(values)


def public_seed(trace_info, options, pub_elements):
    """trace 문맥, 증명 옵션, 공개 입력을 이어 붙인 coin 시드."""
    header = struct.pack("<BI", trace_info.width, trace_info.length)
    return header + options.to_bytes() + elements_to_bytes(pub_elements)
