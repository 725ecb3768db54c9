"""
Groth16 회로 프레임워크: 변수, 선형결합, 제약 시스템
====================================================

회로는 synthesize(cs) 하나로 기술되고, 두 가지 제약 시스템이 이를 소비한다.

**KeypairAssembly** (파라미터 생성):
  witness 없이 합성한다. 각 변수가 어느 제약의 A/B/C에 어떤 계수로 등장하는지
  (QAP의 u_i, v_i, w_i 다항식)를 기록한다. 값 클로저는 호출하지 않는다.

**ProvingAssignment** (증명 생성):
  witness 값을 가지고 합성한다. 제약마다 <A, w>, <B, w>, <C, w> 평가값을 기록한다.
  값 클로저가 AssignmentMissing을 던지면 그대로 전파된다.

**변수 인덱스**:
  Input(0)은 상수 1(ONE)이며 공개 입력이 그 뒤를 잇는다. Aux(i)는 비공개 witness.

사용 예시:
    >>> class Square(Circuit):
    ...     def synthesize(self, cs):
    ...         x = cs.alloc("x", lambda: FR(3))
    ...         y = cs.alloc_input("y", lambda: FR(9))
    ...         cs.enforce("x*x=y", x, x, y)
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager

from nizkp.ec import FR


class Variable:
    INPUT = "input"
    AUX = "aux"

    __slots__ = ("kind", "index")

    def __init__(self, kind, index):
        self.kind = kind
        self.index = index

    def __eq__(self, other):
        return isinstance(other, Variable) and (self.kind, self.index) == (other.kind, other.index)

    def __hash__(self):
        return hash((self.kind, self.index))

    def __repr__(self):
        return f"Variable({self.kind}, {self.index})"

    def __add__(self, other):
        return LinearCombination.of(self) + other

    def __sub__(self, other):
        return LinearCombination.of(self) - other

    def __mul__(self, scalar):
        return LinearCombination.of(self) * scalar

    __rmul__ = __mul__


ONE = Variable(Variable.INPUT, 0)


class LinearCombination:
    """Σ coeff · var. (Variable, FR) 튜플 리스트."""

    def __init__(self, terms=None):
        self.terms = list(terms) if terms else []

    @classmethod
    def zero(cls):
        return cls()

    @classmethod
    def of(cls, value):
        """Variable, LinearCombination, 스칼라(ONE의 계수)를 선형결합으로 바꾼다."""
        if isinstance(value, LinearCombination):
            return value
        if isinstance(value, Variable):
            return cls([(value, FR(1))])
        return cls([(ONE, FR(value))])

    def __add__(self, other):
        return LinearCombination(self.terms + LinearCombination.of(other).terms)

    def __sub__(self, other):
        return LinearCombination(
            self.terms + [(v, -c) for v, c in LinearCombination.of(other).terms]
        )

    def __mul__(self, scalar):
        s = FR(scalar)
        return LinearCombination([(v, c * s) for v, c in self.terms])

    def evaluate(self, inputs, aux):
        acc = FR(0)
        for var, coeff in self.terms:
            val = inputs[var.index] if var.kind == Variable.INPUT else aux[var.index]
            acc = acc + coeff * val
        return acc


class ConstraintSystem(ABC):
    """R1CS 제약 싱크. 모든 제약은 A · B = C 형태."""

    def __init__(self):
        self.num_inputs = 0
        self.num_aux = 0
        self.num_constraints = 0
        self._namespace = []

    @staticmethod
    def one():
        return ONE

    @abstractmethod
    def alloc(self, name, value_fn):
        """비공개 변수를 할당한다."""

    @abstractmethod
    def alloc_input(self, name, value_fn):
        """공개 입력 변수를 할당한다."""

    @abstractmethod
    def enforce(self, name, a, b, c):
        """a · b = c 제약을 추가한다. 인자는 Variable/LinearCombination/스칼라."""

    @contextmanager
    def namespace(self, name):
        self._namespace.append(name)
        try:
            yield self
        finally:
            self._namespace.pop()

    def path(self, name):
        return "/".join(self._namespace + [name])


class Circuit(ABC):
    @abstractmethod
    def synthesize(self, cs):
        """cs 위에 변수와 제약을 만든다."""


# ─────────────────────────────────────────────────────────────────────
# 파라미터 생성용: QAP 계수 기록
# ─────────────────────────────────────────────────────────────────────

class KeypairAssembly(ConstraintSystem):
    """변수별로 (계수, 제약 인덱스) 리스트를 A/B/C 각각에 모은다."""

    def __init__(self):
        super().__init__()
        self.at_inputs, self.bt_inputs, self.ct_inputs = [], [], []
        self.at_aux, self.bt_aux, self.ct_aux = [], [], []

    def alloc(self, name, value_fn):
        index = self.num_aux
        self.num_aux += 1
        self.at_aux.append([])
        self.bt_aux.append([])
        self.ct_aux.append([])
        return Variable(Variable.AUX, index)

    def alloc_input(self, name, value_fn):
        index = self.num_inputs
        self.num_inputs += 1
        self.at_inputs.append([])
        self.bt_inputs.append([])
        self.ct_inputs.append([])
        return Variable(Variable.INPUT, index)

    def enforce(self, name, a, b, c):
        j = self.num_constraints
        self._record(LinearCombination.of(a), self.at_inputs, self.at_aux, j)
        self._record(LinearCombination.of(b), self.bt_inputs, self.bt_aux, j)
        self._record(LinearCombination.of(c), self.ct_inputs, self.ct_aux, j)
        self.num_constraints += 1

    @staticmethod
    def _record(lc, inputs, aux, j):
        for var, coeff in lc.terms:
            target = inputs if var.kind == Variable.INPUT else aux
            target[var.index].append((coeff, j))


# ─────────────────────────────────────────────────────────────────────
# 증명 생성용: witness 평가값 기록
# ─────────────────────────────────────────────────────────────────────

class ProvingAssignment(ConstraintSystem):
    """제약마다 A, B, C 선형결합의 witness 평가값을 기록한다."""

    def __init__(self):
        super().__init__()
        self.input_assignment = []
        self.aux_assignment = []
        self.a = []
        self.b = []
        self.c = []

    def alloc(self, name, value_fn):
        self.aux_assignment.append(FR(value_fn()))
        index = self.num_aux
        self.num_aux += 1
        return Variable(Variable.AUX, index)

    def alloc_input(self, name, value_fn):
        self.input_assignment.append(FR(value_fn()))
        index = self.num_inputs
        self.num_inputs += 1
        return Variable(Variable.INPUT, index)

    def enforce(self, name, a, b, c):
        inputs, aux = self.input_assignment, self.aux_assignment
        self.a.append(LinearCombination.of(a).evaluate(inputs, aux))
        self.b.append(LinearCombination.of(b).evaluate(inputs, aux))
        self.c.append(LinearCombination.of(c).evaluate(inputs, aux))
        self.num_constraints += 1

    def is_satisfied(self):
        return self.unsatisfied_constraint() is None

    def unsatisfied_constraint(self):
        for j, (x, y, z) in enumerate(zip(self.a, self.b, self.c)):
            if x * y != z:
                return j
        return None


def synthesize_for_setup(circuit):
    """ONE 할당 → 회로 합성 → 공개 입력마다 input·0 = 0 제약 (IC 쿼리 밀도 보장)."""
    assembly = KeypairAssembly()
    assembly.alloc_input("one", lambda: FR(1))
    circuit.synthesize(assembly)
    for i in range(assembly.num_inputs):
        assembly.enforce(f"input {i} density", Variable(Variable.INPUT, i), LinearCombination.zero(),
                         LinearCombination.zero())
    return assembly


def synthesize_for_proving(circuit):
    prover = ProvingAssignment()
    prover.alloc_input("one", lambda: FR(1))
    circuit.synthesize(prover)
    for i in range(prover.num_inputs):
        prover.enforce(f"input {i} density", Variable(Variable.INPUT, i), LinearCombination.zero(),
                       LinearCombination.zero())
    return prover
