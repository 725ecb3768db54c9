"""
BN254 곡선 유틸리티 테스트: 점 압축, MSM, 해시-투-곡선
"""
import pytest
from py_ecc import optimized_bn128 as bn128

from nizkp.ec import (
    FR, G1, G2, Z1, Z2, CURVE_ORDER, compress_g1, compress_g2, decompress_g1,
    decompress_g2, ec_add, ec_eq, ec_mul, ec_neg, ec_sub, ec_sum, hash_to_g1,
    is_inf, msm, FQ2, G1_COMPRESSED_SIZE, G2_COMPRESSED_SIZE, _sqrt_fq2,
)


# ─────────────────────────────────────────────────────────────────────
# FR
# ─────────────────────────────────────────────────────────────────────

class TestFR:
    def test_arithmetic(self):
        assert FR(3) * FR(7) == FR(21)
        assert FR(1) / FR(3) * FR(3) == FR(1)
        assert FR(-1) == FR(CURVE_ORDER - 1)

    def test_bytes(self):
        x = FR(123456789)
        data = x.to_bytes()
        assert len(data) == 32
        assert FR.from_bytes(data) == x

    def test_bytes_rejects_non_canonical(self):
        assert FR.from_bytes((CURVE_ORDER - 1).to_bytes(32, "little")) == FR(-1)
        with pytest.raises(ValueError):
            FR.from_bytes(CURVE_ORDER.to_bytes(32, "little"))
        with pytest.raises(ValueError):
            FR.from_bytes((CURVE_ORDER + 5).to_bytes(32, "little"))

    def test_bytes_bad_length(self):
        with pytest.raises(ValueError):
            FR.from_bytes(b"\x01" * 31)

    def test_hashable(self):
        assert len({FR(1), FR(1), FR(2)}) == 2


# ─────────────────────────────────────────────────────────────────────
# 점 연산
# ─────────────────────────────────────────────────────────────────────

class TestPointOps:
    def test_mul_distributes(self):
        assert ec_eq(ec_add(ec_mul(G1, 2), ec_mul(G1, 3)), ec_mul(G1, 5))

    def test_negative_scalar(self):
        assert ec_eq(ec_mul(G1, -1), ec_neg(G1))

    def test_sub_self_is_identity(self):
        assert is_inf(ec_sub(ec_mul(G1, 7), ec_mul(G1, 7)))

    def test_eq_with_identity(self):
        assert ec_eq(Z1, ec_mul(G1, 0))
        assert not ec_eq(Z1, G1)

    def test_sum(self):
        assert ec_eq(ec_sum([G1, G1, G1]), ec_mul(G1, 3))


class TestMSM:
    def test_small(self):
        points = [G1, ec_mul(G1, 2)]
        assert ec_eq(msm(points, [FR(3), FR(4)]), ec_mul(G1, 11))

    def test_pippenger_path(self):
        """16항 이상이면 버킷 방식으로 계산한다."""
        points = [ec_mul(G1, i + 1) for i in range(20)]
        scalars = [FR(1000003 * (i + 7)) for i in range(20)]
        expected = sum((i + 1) * 1000003 * (i + 7) for i in range(20))
        assert ec_eq(msm(points, scalars), ec_mul(G1, expected))

    def test_all_zero_scalars(self):
        assert is_inf(msm([G1, G1], [0, 0]))

    def test_empty(self):
        assert is_inf(msm([], []))

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            msm([G1], [])

    def test_g2(self):
        assert ec_eq(msm([G2, G2], [2, 5]), ec_mul(G2, 7))


# ─────────────────────────────────────────────────────────────────────
# 압축
# ─────────────────────────────────────────────────────────────────────

class TestCompression:
    @pytest.mark.parametrize("k", [1, 2, 12345, CURVE_ORDER - 1])
    def test_g1_round_trip(self, k):
        p = ec_mul(G1, k)
        data = compress_g1(p)
        assert len(data) == G1_COMPRESSED_SIZE
        assert ec_eq(decompress_g1(data), p)

    def test_g1_negation_differs_in_flag_only(self):
        a, b = compress_g1(G1), compress_g1(ec_neg(G1))
        assert a[1:] == b[1:]
        assert a[0] ^ b[0] == 0x80

    def test_g1_identity(self):
        assert is_inf(decompress_g1(compress_g1(Z1)))

    def test_g1_bad_length(self):
        with pytest.raises(ValueError):
            decompress_g1(b"\x00" * 31)

    def test_g1_off_curve(self):
        # x = 0: y² = 3 은 p ≡ 3 mod 4에서 비이차잉여이다
        with pytest.raises(ValueError):
            decompress_g1(bytes(32))

    @pytest.mark.parametrize("k", [1, 99])
    def test_g2_round_trip(self, k):
        p = ec_mul(G2, k)
        data = compress_g2(p)
        assert len(data) == G2_COMPRESSED_SIZE
        assert ec_eq(decompress_g2(data), p)

    def test_g2_identity(self):
        assert is_inf(decompress_g2(compress_g2(Z2)))

    def test_g2_outside_subgroup(self):
        """twist 위의 점이지만 r·P != O 이면 거부한다 (cofactor != 1)."""
        def on_twist(c0):
            x = FQ2([c0, 1])
            return _sqrt_fq2(x * x * x + bn128.b2) is not None

        c0 = next(i for i in range(1, 200) if on_twist(i))
        data = (1).to_bytes(32, "big") + c0.to_bytes(32, "big")
        with pytest.raises(ValueError, match="부분군"):
            decompress_g2(data)


class TestHashToG1:
    def test_deterministic(self):
        assert ec_eq(hash_to_g1(b"G", 3), hash_to_g1(b"G", 3))

    def test_distinct_indices(self):
        assert not ec_eq(hash_to_g1(b"G", 0), hash_to_g1(b"G", 1))

    def test_on_curve(self):
        p = hash_to_g1(b"H", 5)
        assert ec_eq(decompress_g1(compress_g1(p)), p)
