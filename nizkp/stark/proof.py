"""
STARK 증명 구조와 직렬화
========================

  문맥        trace 폭/길이, ProofOptions, 다이제스트 크기
  커밋먼트    trace 루트, 합성 다항식 루트, FRI 레이어 루트들
  OOD 프레임  T_j(z), T_j(z·ω), h_i(z)
  FRI         나머지 다항식 계수, grinding nonce
  쿼리        trace / 합성 / FRI 레이어마다 (열린 행, Merkle 경로)

직렬화는 struct 기반의 리틀엔디안 고정 포맷이다.
"""

import struct
from dataclasses import dataclass, field
from typing import List

from nizkp.stark.air import TraceInfo
from nizkp.stark.field import BaseElement, extension_field
from nizkp.stark.options import ProofOptions, conjectured_security, proven_security


@dataclass
class Queries:
    """열린 행과 각 행의 Merkle 인증 경로. rows[i]와 paths[i]가 같은 리프에 대응한다."""
    rows: List[list] = field(default_factory=list)
    paths: List[list] = field(default_factory=list)

    def add(self, row, path):
        self.rows.append(row)
        self.paths.append(path)

    def __len__(self):
        return len(self.rows)


class _Writer:
    def __init__(self):
        self.parts = []

    def pack(self, fmt, *values):
        self.parts.append(struct.pack(fmt, *values))

    def raw(self, data):
        self.parts.append(bytes(data))

    def elements(self, elements):
        self.pack("<H", len(elements))
        for e in elements:
            self.raw(e.to_bytes())

    def digests(self, digests):
        self.pack("<B", len(digests))
        for d in digests:
            self.raw(d)

    def queries(self, queries):
        width = len(queries.rows[0]) if queries.rows else 0
        depth = len(queries.paths[0]) if queries.paths else 0
        self.pack("<HBB", len(queries), width, depth)
        for row, path in zip(queries.rows, queries.paths):
            for e in row:
                self.raw(e.to_bytes())
            for d in path:
                self.raw(d)

    def getvalue(self):
        return b"".join(self.parts)


class _Reader:
    def __init__(self, data, digest_size=32):
        self.data = bytes(data)
        self.pos = 0
        self.digest_size = digest_size

    def unpack(self, fmt):
        size = struct.calcsize(fmt)
        values = struct.unpack(fmt, self.read(size))
        return values if len(values) > 1 else values[0]

    def read(self, size):
        if self.pos + size > len(self.data):
            raise ValueError("unexpected end of proof data")
        out = self.data[self.pos:self.pos + size]
        self.pos += size
        return out

    def element(self, cls):
        return cls.from_bytes(self.read(cls.ELEMENT_BYTES))

    def elements(self, cls):
        return [self.element(cls) for _ in range(self.unpack("<H"))]

    def digest(self):
        return self.read(self.digest_size)

    def digests(self):
        return [self.digest() for _ in range(self.unpack("<B"))]

    def queries(self, cls):
        count, width, depth = self.unpack("<HBB")
        queries = Queries()
        for _ in range(count):
            row = [self.element(cls) for _ in range(width)]
            path = [self.digest() for _ in range(depth)]
            queries.add(row, path)
        return queries

    def finish(self):
        if self.pos != len(self.data):
            raise ValueError(f"{len(self.data) - self.pos} trailing bytes in proof data")


@dataclass
class StarkProof:
    trace_info: TraceInfo
    options: ProofOptions
    trace_root: bytes
    composition_root: bytes
    ood_trace_current: list
    ood_trace_next: list
    ood_composition: list
    fri_roots: List[bytes]
    fri_remainder: list
    pow_nonce: int
    trace_queries: Queries
    composition_queries: Queries
    fri_queries: List[Queries]

    @property
    def lde_domain_size(self):
        return self.trace_info.length * self.options.blowup_factor

    def security_level(self, hasher, conjectured=True):
        if conjectured:
            return conjectured_security(self.options, self.trace_info.length, hasher.COLLISION_RESISTANCE)
        return proven_security(self.options, self.trace_info.length, hasher.COLLISION_RESISTANCE)

    def to_bytes(self):
        w = _Writer()
        w.pack("<BIB", self.trace_info.width, self.trace_info.length, len(self.trace_root))
        w.raw(self.options.to_bytes())
        w.raw(self.trace_root)
        w.raw(self.composition_root)
        w.elements(self.ood_trace_current)
        w.elements(self.ood_trace_next)
        w.elements(self.ood_composition)
        w.digests(self.fri_roots)
        w.elements(self.fri_remainder)
        w.pack("<Q", self.pow_nonce)
        w.queries(self.trace_queries)
        w.queries(self.composition_queries)
        w.pack("<B", len(self.fri_queries))
        for layer in self.fri_queries:
            w.queries(layer)
        return w.getvalue()

    @classmethod
    def from_bytes(cls, data):
        r = _Reader(data)
        width, length, digest_size = r.unpack("<BIB")
        r.digest_size = digest_size
        options = ProofOptions.from_bytes(r.read(ProofOptions.serialized_size()))
        ext = extension_field(options.field_extension)

        trace_root = r.digest()
        composition_root = r.digest()
        ood_trace_current = r.elements(ext)
        ood_trace_next = r.elements(ext)
        ood_composition = r.elements(ext)
        fri_roots = r.digests()
        fri_remainder = r.elements(ext)
        pow_nonce = r.unpack("<Q")
        trace_queries = r.queries(BaseElement)
        composition_queries = r.queries(ext)
        fri_queries = [r.queries(ext) for _ in range(r.unpack("<B"))]
        r.finish()

        return cls(
            trace_info=TraceInfo(width, length),
            options=options,
            trace_root=trace_root,
            composition_root=composition_root,
            ood_trace_current=ood_trace_current,
            ood_trace_next=ood_trace_next,
            ood_composition=ood_composition,
            fri_roots=fri_roots,
            fri_remainder=fri_remainder,
            pow_nonce=pow_nonce,
            trace_queries=trace_queries,
            composition_queries=composition_queries,
            fri_queries=fri_queries,
        )
