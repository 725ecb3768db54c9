"""
ProofOptions 검증, 직렬화, 보안 수준 계산
"""
from dataclasses import replace

import pytest

from nizkp.errors import ConfigurationError
from nizkp.mimc.stark import default_options
from nizkp.stark.field import FieldExtension
from nizkp.stark.hashers import Blake3_192, Blake3_256
from nizkp.stark.options import ProofOptions, conjectured_security, proven_security


class TestValidation:
    def test_defaults(self):
        options = default_options()
        assert options.num_queries == 42
        assert options.blowup_factor == 8
        assert options.grinding_factor == 16
        assert options.field_extension == FieldExtension.NONE
        assert options.fri_folding_factor == 8
        assert options.fri_remainder_max_degree == 31
        assert options.extension_degree == 1

    @pytest.mark.parametrize("field, value", [
        ("num_queries", 0),
        ("num_queries", 256),
        ("blowup_factor", 1),
        ("blowup_factor", 6),
        ("blowup_factor", 256),
        ("grinding_factor", 33),
        ("fri_folding_factor", 3),
        ("fri_folding_factor", 32),
        ("fri_remainder_max_degree", 6),
        ("fri_remainder_max_degree", 511),
        ("field_extension", 2),
    ])
    def test_out_of_range(self, field, value):
        with pytest.raises(ConfigurationError):
            replace(default_options(), **{field: value})

    @pytest.mark.parametrize("field, value", [
        ("num_queries", 255),
        ("blowup_factor", 2),
        ("blowup_factor", 128),
        ("grinding_factor", 0),
        ("fri_folding_factor", 16),
        ("fri_remainder_max_degree", 0),
        ("fri_remainder_max_degree", 255),
        ("field_extension", FieldExtension.CUBIC),
    ])
    def test_in_range(self, field, value):
        assert getattr(replace(default_options(), **{field: value}), field) == value

    def test_equality(self):
        assert default_options() == default_options()
        assert replace(default_options(), num_queries=41) != default_options()


class TestSerialization:
    def test_round_trip(self):
        options = replace(default_options(), field_extension=FieldExtension.QUADRATIC, fri_folding_factor=4)
        data = options.to_bytes()
        assert len(data) == ProofOptions.serialized_size() == 6
        assert ProofOptions.from_bytes(data) == options

    def test_layout(self):
        assert default_options().to_bytes() == bytes([42, 3, 16, 1, 3, 31])

    def test_unknown_extension(self):
        with pytest.raises(ConfigurationError):
            ProofOptions.from_bytes(bytes([42, 3, 16, 9, 3, 31]))


class TestSecurity:
    def test_default_options_full_rounds(self):
        """R = 255: n = 256, N = 2048"""
        options = default_options()
        assert conjectured_security(options, 256, 128) == 116
        assert proven_security(options, 256, 128) == 78

    def test_default_options_small_trace(self):
        options = default_options()
        assert conjectured_security(options, 8, 128) == 121
        assert proven_security(options, 8, 128) == 78

    def test_capped_by_collision_resistance(self):
        options = default_options()
        assert conjectured_security(options, 8, Blake3_192.COLLISION_RESISTANCE) == 96
        assert conjectured_security(options, 8, Blake3_256.COLLISION_RESISTANCE) == 121

    def test_query_bound(self):
        options = replace(default_options(), num_queries=10, grinding_factor=0)
        # 10 · log2(8) = 30
        assert conjectured_security(options, 256, 128) == 29
        assert proven_security(options, 256, 128) == 14

    def test_extension_raises_field_bound(self):
        options = replace(default_options(), num_queries=100, field_extension=FieldExtension.QUADRATIC)
        # field bound 256 - 11, query bound 316: 충돌 저항성 128이 상한
        assert conjectured_security(options, 256, 128) == 128
