"""
STARK 증명 옵션과 허용 옵션 정책
================================

**ProofOptions** (생성 시 범위 검사, 위반하면 ConfigurationError):
  num_queries               1..255
  blowup_factor             2의 거듭제곱, 2..128
  grinding_factor           0..32
  field_extension           FieldExtension
  fri_folding_factor        2, 4, 8, 16
  fri_remainder_max_degree  2^j - 1, 255 이하

**AcceptableOptions**: verifier가 받아들일 증명 옵션의 정책
  OptionSet([...])                  목록에 있는 옵션만
  MinConjecturedSecurity(bits)      추정 보안 수준이 bits 이상
  MinProvenSecurity(bits)           증명된 보안 수준이 bits 이상

**보안 수준**:
  conjectured = min(field_bits·ext - log2(N),  queries·log2(blowup) + grinding) - 1
  proven      = min(field_bits·ext - log2(N) - log2(n), queries·log2(blowup)/2 + grinding) - 1
  (둘 다 해시 충돌 저항성으로 상한. N = LDE 도메인 크기, n = trace 길이)
"""

import math
import struct
from dataclasses import dataclass

from nizkp.errors import ConfigurationError
from nizkp.polynomial import is_power_of_two
from nizkp.stark.field import FieldExtension, MODULUS_BITS


FRI_FOLDING_FACTORS = (2, 4, 8, 16)


@dataclass(frozen=True)
class ProofOptions:
    num_queries: int
    blowup_factor: int
    grinding_factor: int
    field_extension: FieldExtension
    fri_folding_factor: int
    fri_remainder_max_degree: int

    _FORMAT = "<BBBBBB"

    def __post_init__(self):
        if not 1 <= self.num_queries <= 255:
            raise ConfigurationError(f"number of queries must be in 1..255: {self.num_queries}")
        if not is_power_of_two(self.blowup_factor) or not 2 <= self.blowup_factor <= 128:
            raise ConfigurationError(
                f"blowup factor must be a power of two in 2..128: {self.blowup_factor}")
        if not 0 <= self.grinding_factor <= 32:
            raise ConfigurationError(f"grinding factor must be in 0..32: {self.grinding_factor}")
        if not isinstance(self.field_extension, FieldExtension):
            raise ConfigurationError(f"unknown field extension: {self.field_extension!r}")
        if self.fri_folding_factor not in FRI_FOLDING_FACTORS:
            raise ConfigurationError(
                f"FRI folding factor must be one of {FRI_FOLDING_FACTORS}: {self.fri_folding_factor}")
        degree = self.fri_remainder_max_degree
        if degree > 255 or not is_power_of_two(degree + 1):
            raise ConfigurationError(
                f"FRI remainder max degree must be 2^j - 1 and at most 255: {degree}")

    @property
    def extension_degree(self):
        return self.field_extension.value

    def to_bytes(self):
        return struct.pack(
            self._FORMAT, self.num_queries, int(math.log2(self.blowup_factor)),
            self.grinding_factor, self.field_extension.value,
            int(math.log2(self.fri_folding_factor)), self.fri_remainder_max_degree,
        )

    @classmethod
    def from_bytes(cls, data):
        queries, log_blowup, grinding, extension, log_folding, remainder = struct.unpack(cls._FORMAT, data)
        try:
            field_extension = FieldExtension(extension)
        except ValueError:
            raise ConfigurationError(f"unknown field extension: {extension}") from None
        return cls(queries, 1 << log_blowup, grinding, field_extension, 1 << log_folding, remainder)

    @classmethod
    def serialized_size(cls):
        return struct.calcsize(cls._FORMAT)


def conjectured_security(options, trace_length, collision_resistance):
    lde_domain_size = trace_length * options.blowup_factor
    field_security = MODULUS_BITS * options.extension_degree - int(math.log2(lde_domain_size))
    query_security = int(options.num_queries * math.log2(options.blowup_factor)) + options.grinding_factor
    return min(min(field_security, query_security) - 1, collision_resistance)


def proven_security(options, trace_length, collision_resistance):
    lde_domain_size = trace_length * options.blowup_factor
    field_security = (MODULUS_BITS * options.extension_degree
                      - int(math.log2(lde_domain_size)) - int(math.log2(trace_length)))
    query_security = int(options.num_queries * math.log2(options.blowup_factor) / 2) + options.grinding_factor
    return min(min(field_security, query_security) - 1, collision_resistance)


class AcceptableOptions:
    def accepts(self, proof, hasher):
        raise NotImplementedError


class OptionSet(AcceptableOptions):
    def __init__(self, options):
        self.options = list(options)

    def accepts(self, proof, hasher):
        return proof.options in self.options

    def __repr__(self):
        return f"OptionSet({self.options!r})"


class MinConjecturedSecurity(AcceptableOptions):
    def __init__(self, bits):
        self.bits = bits

    def accepts(self, proof, hasher):
        return proof.security_level(hasher, conjectured=True) >= self.bits

    def __repr__(self):
        return f"MinConjecturedSecurity({self.bits})"


class MinProvenSecurity(AcceptableOptions):
    def __init__(self, bits):
        self.bits = bits

    def accepts(self, proof, hasher):
        return proof.security_level(hasher, conjectured=False) >= self.bits

    def __repr__(self):
        return f"MinProvenSecurity({self.bits})"
