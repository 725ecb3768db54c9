import pytest

from nizkp.config import RANDOMNESS_SEED
from nizkp.ec import CURVE_ORDER
from nizkp.rng import SeededRng


class TestSeededRng:
    def test_deterministic(self):
        a, b = SeededRng(RANDOMNESS_SEED), SeededRng(RANDOMNESS_SEED)
        assert a.fill_bytes(100) == b.fill_bytes(100)

    def test_chunking_does_not_change_stream(self):
        a, b = SeededRng(RANDOMNESS_SEED), SeededRng(RANDOMNESS_SEED)
        assert a.fill_bytes(7) + a.fill_bytes(50) == b.fill_bytes(57)

    def test_int_seed(self):
        assert SeededRng(24).fill_bytes(16) == SeededRng((24).to_bytes(32, "big")).fill_bytes(16)

    def test_next_u64_range(self):
        rng = SeededRng(RANDOMNESS_SEED)
        for _ in range(10):
            assert 0 <= rng.next_u64() < 2 ** 64

    def test_random_scalar_range(self):
        rng = SeededRng(RANDOMNESS_SEED)
        for _ in range(10):
            assert 0 <= rng.random_scalar(CURVE_ORDER) < CURVE_ORDER

    def test_random_nonzero(self):
        rng = SeededRng(RANDOMNESS_SEED)
        assert all(rng.random_nonzero(2) == 1 for _ in range(10))

    def test_seeds_differ(self):
        assert SeededRng(bytes(32)).fill_bytes(32) != SeededRng(RANDOMNESS_SEED).fill_bytes(32)
