"""
STARK 기본 필드 f128과 2차 확장체
=================================

**BaseElement**:
  p = 2^128 - 45·2^40 + 1 위의 원소. py_ecc의 FQ를 상속하되, 128비트 지수 연산과
  역원이 자주 쓰이므로 내장 pow()를 쓰도록 연산자를 다시 정의한다.
  p - 1 = 2^40 × (2^88 - 45) 이므로 2^40 크기까지의 FFT 도메인을 지원한다.

**QuadExtElement**:
  F_p[u] / (u² - g), g는 GENERATOR (이차비잉여이므로 u² - g는 기약).
  기본 필드 원소나 정수와 어느 쪽에서 섞어도 확장체 원소가 된다.

**FieldExtension**:
  NONE, QUADRATIC, CUBIC. f128은 NONE과 QUADRATIC만 지원한다.

사용 예시:
    >>> a = BaseElement(3)
    >>> a ** (BaseElement.field_modulus - 1)    # 1
    >>> QuadExtElement(a, 1) * a                # (9, 3)
"""

from enum import Enum

from py_ecc.fields.field_elements import FQ

from nizkp.errors import ConfigurationError


MODULUS = 2 ** 128 - 45 * 2 ** 40 + 1
MODULUS_BITS = 128
TWO_ADICITY = 40


def _find_non_residue(p):
    """오일러 판정법으로 가장 작은 이차비잉여를 찾는다."""
    g = 2
    while pow(g, (p - 1) // 2, p) != p - 1:
        g += 1
    return g


class BaseElement(FQ):
    field_modulus = MODULUS

    TWO_ADICITY = TWO_ADICITY
    GENERATOR = _find_non_residue(MODULUS)

    ELEMENT_BYTES = 16
    EXTENSION_DEGREE = 1

    def __init__(self, val=0):
        if isinstance(val, FQ):
            self.n = val.n % MODULUS
        elif isinstance(val, int):
            self.n = val % MODULUS
        else:
            raise TypeError(f"Expected an int or FQ object, but got object of type {type(val)}")

    @staticmethod
    def _other(other):
        if isinstance(other, FQ):
            return other.n
        if isinstance(other, int):
            return other
        return None

    def __add__(self, other):
        on = self._other(other)
        if on is None:
            return NotImplemented
        return BaseElement(self.n + on)

    __radd__ = __add__

    def __sub__(self, other):
        on = self._other(other)
        if on is None:
            return NotImplemented
        return BaseElement(self.n - on)

    def __rsub__(self, other):
        on = self._other(other)
        if on is None:
            return NotImplemented
        return BaseElement(on - self.n)

    def __mul__(self, other):
        on = self._other(other)
        if on is None:
            return NotImplemented
        return BaseElement(self.n * on)

    __rmul__ = __mul__

    def __truediv__(self, other):
        on = self._other(other)
        if on is None:
            return NotImplemented
        return BaseElement(self.n * pow(on, -1, MODULUS))

    def __rtruediv__(self, other):
        on = self._other(other)
        if on is None:
            return NotImplemented
        return BaseElement(on * pow(self.n, -1, MODULUS))

    def __pow__(self, exponent):
        return BaseElement(pow(self.n, exponent, MODULUS))

    def __neg__(self):
        return BaseElement(-self.n)

    def __eq__(self, other):
        if isinstance(other, QuadExtElement):
            return other == self
        on = self._other(other)
        if on is None:
            return NotImplemented
        return self.n == on % MODULUS

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self.n)

    def inv(self):
        return BaseElement(pow(self.n, -1, MODULUS))

    def cube(self):
        return self * self * self

    @classmethod
    def one(cls):
        return cls(1)

    @classmethod
    def zero(cls):
        return cls(0)

    @classmethod
    def from_base_elements(cls, elements):
        return cls(elements[0])

    def to_base_elements(self):
        return [self]

    def to_bytes(self):
        return self.n.to_bytes(self.ELEMENT_BYTES, "little")

    @classmethod
    def from_bytes(cls, data):
        value = int.from_bytes(data, "little")
        if value >= MODULUS:
            raise ValueError("field element encoding is not canonical")
        return cls(value)


NON_RESIDUE = BaseElement.GENERATOR


class QuadExtElement:
    """a0 + a1·u, u² = NON_RESIDUE."""

    __slots__ = ("a0", "a1")

    EXTENSION_DEGREE = 2
    ELEMENT_BYTES = 2 * BaseElement.ELEMENT_BYTES

    def __init__(self, a0=0, a1=0):
        if isinstance(a0, QuadExtElement):
            a0, a1 = a0.a0, a0.a1
        self.a0 = BaseElement(a0)
        self.a1 = BaseElement(a1)

    @staticmethod
    def _lift(other):
        if isinstance(other, QuadExtElement):
            return other
        if isinstance(other, (FQ, int)):
            return QuadExtElement(other)
        return None

    def __add__(self, other):
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return QuadExtElement(self.a0 + o.a0, self.a1 + o.a1)

    __radd__ = __add__

    def __sub__(self, other):
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return QuadExtElement(self.a0 - o.a0, self.a1 - o.a1)

    def __rsub__(self, other):
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return o - self

    def __mul__(self, other):
        if isinstance(other, (FQ, int)):
            return QuadExtElement(self.a0 * other, self.a1 * other)
        if not isinstance(other, QuadExtElement):
            return NotImplemented
        a0 = self.a0 * other.a0 + self.a1 * other.a1 * NON_RESIDUE
        a1 = self.a0 * other.a1 + self.a1 * other.a0
        return QuadExtElement(a0, a1)

    __rmul__ = __mul__

    def inv(self):
        norm = self.a0 * self.a0 - self.a1 * self.a1 * NON_RESIDUE
        if norm == 0:
            raise ZeroDivisionError("inverse of zero")
        norm_inv = norm.inv()
        return QuadExtElement(self.a0 * norm_inv, -self.a1 * norm_inv)

    def __truediv__(self, other):
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return self * o.inv()

    def __rtruediv__(self, other):
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return o * self.inv()

    def __pow__(self, exponent):
        result = QuadExtElement(1)
        base = self
        while exponent:
            if exponent & 1:
                result = result * base
            base = base * base
            exponent >>= 1
        return result

    def __neg__(self):
        return QuadExtElement(-self.a0, -self.a1)

    def __eq__(self, other):
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return self.a0 == o.a0 and self.a1 == o.a1

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.a0.n, self.a1.n))

    def __repr__(self):
        return f"({self.a0!r}, {self.a1!r})"

    def cube(self):
        return self * self * self

    @classmethod
    def one(cls):
        return cls(1)

    @classmethod
    def zero(cls):
        return cls(0)

    @classmethod
    def from_base_elements(cls, elements):
        return cls(elements[0], elements[1])

    def to_base_elements(self):
        return [self.a0, self.a1]

    def to_bytes(self):
        return self.a0.to_bytes() + self.a1.to_bytes()

    @classmethod
    def from_bytes(cls, data):
        size = BaseElement.ELEMENT_BYTES
        return cls(BaseElement.from_bytes(data[:size]), BaseElement.from_bytes(data[size:]))


class FieldExtension(Enum):
    NONE = 1
    QUADRATIC = 2
    CUBIC = 3


def extension_field(extension):
    """FieldExtension → 확장체 원소 클래스."""
    if extension == FieldExtension.NONE:
        return BaseElement
    if extension == FieldExtension.QUADRATIC:
        return QuadExtElement
    raise ConfigurationError(f"{extension.name} field extension is not supported for the f128 field")


def elements_to_bytes(elements):
    return b"".join(e.to_bytes() for e in elements)


def elements_from_bytes(field, data):
    size = field.ELEMENT_BYTES
    if len(data) % size:
        raise ValueError(f"element data must be a multiple of {size} bytes")
    return [field.from_bytes(data[i:i + size]) for i in range(0, len(data), size)]
