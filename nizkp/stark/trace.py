"""
실행 trace 테이블
=================

열 우선(column-major)으로 저장한다. fill()은 초기 상태 콜백과 전이 콜백을 받아
모든 행을 채운다.

    trace = TraceTable(3, 256)
    trace.fill(init, update)      # init(state), update(step, state)
"""

from nizkp.errors import ConfigurationError
from nizkp.polynomial import is_power_of_two
from nizkp.stark.air import MIN_TRACE_LENGTH, TraceInfo
from nizkp.stark.field import BaseElement


class TraceTable:
    def __init__(self, width, length):
        if width < 1:
            raise ConfigurationError("trace width must be positive")
        if not is_power_of_two(length) or length < MIN_TRACE_LENGTH:
            raise ConfigurationError(
                f"trace length must be a power of two and at least {MIN_TRACE_LENGTH}: {length}")
        self.width = width
        self.length = length
        self.columns = [[BaseElement.zero()] * length for _ in range(width)]

    def fill(self, init, update):
        state = [BaseElement.zero()] * self.width
        init(state)
        self._set_row(0, state)
        for step in range(self.length - 1):
            update(step, state)
            self._set_row(step + 1, state)

    def _set_row(self, row, state):
        for col, value in enumerate(state):
            self.columns[col][row] = value

    def get(self, column, step):
        return self.columns[column][step]

    def row(self, step):
        return [column[step] for column in self.columns]

    def info(self):
        return TraceInfo(self.width, self.length)
