"""
AIR (Algebraic Intermediate Representation)
===========================================

계산을 trace와 두 종류의 제약으로 표현한다.

**전이 제약 (transition constraints)**:
  인접한 두 행 (current, next)에 대해 0이 되어야 하는 다항식.
  차수는 trace 길이와 무관하게 선언한다 (MiMC: [3, 1]).
  마지막 행에서 첫 행으로 넘어가는 전이는 검사하지 않는다:
      Z_T(x) = (x^n - 1) / (x - ω^{n-1})

**경계 제약 (assertions)**:
  column 열의 step 행 값이 value여야 한다: (T(x) - value) / (x - ω^step)

**합성 다항식 (composition)**:
  각 몫 q_k에 (α_k + β_k · x^{D - deg q_k})를 곱해 더한다. D = ce·n - 1,
  ce = next_pow2(max_degree - 1) 는 합성 다항식 열 개수이다.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import cached_property
from typing import List

from nizkp.errors import ConfigurationError
from nizkp.polynomial import get_root_of_unity, is_power_of_two, next_power_of_two
from nizkp.stark.field import BaseElement, extension_field

MIN_TRACE_LENGTH = 8


@dataclass(frozen=True)
class TraceInfo:
    width: int
    length: int

    def validate(self):
        if not is_power_of_two(self.length) or self.length < MIN_TRACE_LENGTH:
            raise ConfigurationError(
                f"trace length must be a power of two and at least {MIN_TRACE_LENGTH}: {self.length}")


@dataclass(frozen=True)
class TransitionConstraintDegree:
    base: int


@dataclass(frozen=True)
class Assertion:
    column: int
    step: int
    value: BaseElement

    @classmethod
    def single(cls, column, step, value):
        return cls(column, step, value)


@dataclass
class EvaluationFrame:
    current: List
    next: List


class AirContext:
    def __init__(self, trace_info, transition_degrees, num_assertions, options):
        trace_info.validate()
        if not transition_degrees:
            raise ConfigurationError("at least one transition constraint is required")
        self.trace_info = trace_info
        self.transition_degrees = list(transition_degrees)
        self.num_assertions = num_assertions
        self.options = options

        max_degree = max(d.base for d in self.transition_degrees)
        self.composition_columns = max(1, next_power_of_two(max_degree - 1))
        if options.blowup_factor < self.composition_columns:
            raise ConfigurationError(
                f"blowup factor {options.blowup_factor} is smaller than the number of "
                f"composition columns {self.composition_columns}")

    @property
    def trace_length(self):
        return self.trace_info.length

    @property
    def trace_width(self):
        return self.trace_info.width

    @property
    def lde_domain_size(self):
        return self.trace_length * self.options.blowup_factor

    @property
    def composition_degree(self):
        return self.composition_columns * self.trace_length - 1

    def transition_quotient_degree(self, degree):
        return (degree.base - 1) * (self.trace_length - 1)

    def assertion_quotient_degree(self):
        return self.trace_length - 2


class Air(ABC):
    """구체적인 계산은 이 클래스를 상속해 전이 제약과 경계 제약을 정의한다."""

    def __init__(self, trace_info, pub_inputs, options):
        self.pub_inputs = pub_inputs
        self.options = options

    @property
    @abstractmethod
    def context(self):
        pass

    @abstractmethod
    def evaluate_transition(self, frame, result):
        """result[k] += 제약 k의 평가값. frame 원소는 기본 필드나 확장체 원소일 수 있다."""

    @abstractmethod
    def get_assertions(self):
        pass

    @property
    def trace_length(self):
        return self.context.trace_length

    @property
    def trace_info(self):
        return self.context.trace_info

    @property
    def extension(self):
        return extension_field(self.options.field_extension)

    @cached_property
    def trace_domain_generator(self):
        return get_root_of_unity(BaseElement, self.trace_length)

    def num_transition_constraints(self):
        return len(self.context.transition_degrees)

    def transition_divisor(self, x):
        n = self.trace_length
        last = self.trace_domain_generator ** (n - 1)
        return (x ** n - 1) / (x - last)

    def evaluate_constraints(self, frame, x, coefficients):
        """점 x에서의 합성 다항식 값 H(x).

        coefficients: 전이 제약마다, 그리고 assertion마다 (α, β) 쌍
        """
        ctx = self.context
        D = ctx.composition_degree
        num_transitions = self.num_transition_constraints()

        evaluations = [x * 0 for _ in range(num_transitions)]
        self.evaluate_transition(frame, evaluations)
        divisor = self.transition_divisor(x)

        result = x * 0
        for k, (value, degree) in enumerate(zip(evaluations, ctx.transition_degrees)):
            alpha, beta = coefficients[k]
            adjustment = x ** (D - ctx.transition_quotient_degree(degree))
            result = result + (value / divisor) * (alpha + beta * adjustment)

        omega = self.trace_domain_generator
        adjustment = x ** (D - ctx.assertion_quotient_degree())
        for k, assertion in enumerate(self.get_assertions()):
            alpha, beta = coefficients[num_transitions + k]
            quotient = (frame.current[assertion.column] - assertion.value) / (x - omega ** assertion.step)
            result = result + quotient * (alpha + beta * adjustment)
        return result


def are_equal(a, b):
    return a - b
