"""
결정론적 난수 스트림
====================

32바이트 시드로부터 SHA-256 카운터 모드 스트림을 만든다. 하나의 SeededRng가
백엔드 실행 전체(라운드 상수 → preimage → 블라인딩/toxic waste → 증명 난수)를
관통하므로 같은 시드는 항상 같은 상수, 같은 preimage, 같은 image를 만든다.

사용 예시:
    >>> rng = SeededRng(bytes([24] * 32))
    >>> x = rng.random_scalar(CURVE_ORDER)
"""

import hashlib


class SeededRng:
    """SHA-256(seed || counter) 블록을 이어 붙인 바이트 스트림."""

    BLOCK_SIZE = 32

    def __init__(self, seed):
        if isinstance(seed, int):
            seed = seed.to_bytes(32, "big")
        self.seed = bytes(seed)
        self.counter = 0
        self._buffer = b""

    def _next_block(self):
        h = hashlib.sha256(self.seed + self.counter.to_bytes(8, "little")).digest()
        self.counter += 1
        return h

    def fill_bytes(self, n):
        while len(self._buffer) < n:
            self._buffer += self._next_block()
        out, self._buffer = self._buffer[:n], self._buffer[n:]
        return out

    def next_u64(self):
        return int.from_bytes(self.fill_bytes(8), "little")

    def random_scalar(self, modulus):
        """[0, modulus) 범위의 정수. 64바이트를 모듈러 축소하여 편향을 무시할 수준으로 줄인다."""
        return int.from_bytes(self.fill_bytes(64), "little") % modulus

    def random_nonzero(self, modulus):
        while True:
            x = self.random_scalar(modulus)
            if x != 0:
                return x
