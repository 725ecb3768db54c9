"""
STARK 평가 도메인
=================

  trace 도메인  {ω_n^i},          n = trace 길이
  LDE 도메인    {g · ω_N^i},      N = n · blowup, g = 필드 GENERATOR (코셋 오프셋)

g는 이차비잉여이므로 어떤 2의 거듭제곱 크기 부분군에도 속하지 않고, 두 도메인은 겹치지 않는다.
"""

from functools import cached_property

from nizkp.polynomial import get_root_of_unity, powers
from nizkp.stark.field import BaseElement


class StarkDomain:
    def __init__(self, trace_length, blowup_factor):
        self.trace_length = trace_length
        self.blowup_factor = blowup_factor
        self.lde_size = trace_length * blowup_factor
        self.offset = BaseElement(BaseElement.GENERATOR)
        self.trace_generator = get_root_of_unity(BaseElement, trace_length)
        self.lde_generator = get_root_of_unity(BaseElement, self.lde_size)

    @cached_property
    def lde_points(self):
        return [self.offset * w for w in powers(self.lde_generator, self.lde_size)]

    def lde_point(self, index):
        return self.offset * self.lde_generator ** index

    def in_trace_domain(self, x):
        return x ** self.trace_length == 1

    def in_lde_domain(self, x):
        return (x / self.offset) ** self.lde_size == 1

    def draw_ood_point(self, coin, field):
        """두 도메인 어디에도 속하지 않는 z를 뽑는다."""
        while True:
            z = coin.draw(field)
            if not self.in_trace_domain(z) and not self.in_lde_domain(z):
                return z
