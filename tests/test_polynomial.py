import pytest

from nizkp.ec import FR
from nizkp.polynomial import (
    coset_fft, coset_ifft, evaluate, fft, get_root_of_unity, ifft,
    is_power_of_two, next_power_of_two, pad, powers,
)
from nizkp.stark.field import BaseElement


class TestHelpers:
    def test_power_of_two(self):
        assert [n for n in range(1, 20) if is_power_of_two(n)] == [1, 2, 4, 8, 16]
        assert not is_power_of_two(0)

    def test_next_power_of_two(self):
        assert next_power_of_two(1) == 1
        assert next_power_of_two(5) == 8
        assert next_power_of_two(510) == 512

    def test_powers(self):
        assert powers(FR(3), 4) == [FR(1), FR(3), FR(9), FR(27)]

    def test_pad(self):
        assert pad([FR(1)], 3, FR(0)) == [FR(1), FR(0), FR(0)]


class TestRootOfUnity:
    @pytest.mark.parametrize("field", [FR, BaseElement])
    def test_order(self, field):
        omega = get_root_of_unity(field, 16)
        assert omega ** 16 == field(1)
        assert omega ** 8 != field(1)

    def test_not_power_of_two(self):
        with pytest.raises(ValueError):
            get_root_of_unity(FR, 12)

    def test_too_large(self):
        with pytest.raises(ValueError):
            get_root_of_unity(FR, 1 << 29)


class TestFFT:
    @pytest.mark.parametrize("field", [FR, BaseElement])
    def test_matches_horner(self, field):
        coeffs = [field(c) for c in (5, 0, 3, 1, 9, 2, 7, 4)]
        omega = get_root_of_unity(field, 8)
        evals = fft(coeffs, omega)
        for i, v in enumerate(evals):
            assert v == evaluate(coeffs, omega ** i)

    def test_ifft_inverts(self):
        coeffs = [FR(c) for c in (1, 2, 3, 4)]
        omega = get_root_of_unity(FR, 4)
        assert ifft(fft(coeffs, omega), omega) == coeffs

    def test_coset(self):
        coeffs = [BaseElement(c) for c in (4, 1, 1, 6)]
        omega = get_root_of_unity(BaseElement, 4)
        g = BaseElement(BaseElement.GENERATOR)
        evals = coset_fft(coeffs, omega, g)
        for i, v in enumerate(evals):
            assert v == evaluate(coeffs, g * omega ** i)
        assert coset_ifft(evals, omega, g) == coeffs
