"""
STARK 해시 전략
===============

prover와 verifier는 생성 시점에 해시 전략 객체를 받는다. 모든 전략은 같은
인터페이스를 가진다.

  DIGEST_SIZE            다이제스트 바이트 수
  COLLISION_RESISTANCE   충돌 저항성 (비트), 보안 수준 상한으로 쓰인다
  hash(data)             bytes → digest
  merge(a, b)            두 다이제스트를 하나로 (Merkle 내부 노드)
  merge_with_int(d, v)   다이제스트와 64비트 정수 (grinding nonce, coin 카운터)
  hash_elements(elems)   필드 원소 리스트 → digest (Merkle 리프)
"""

import hashlib

import blake3

from nizkp.stark.field import elements_to_bytes


class Hasher:
    name = "hasher"
    DIGEST_SIZE = 32
    COLLISION_RESISTANCE = 128

    def hash(self, data):
        raise NotImplementedError

    def merge(self, left, right):
        return self.hash(left + right)

    def merge_with_int(self, digest, value):
        return self.hash(digest + value.to_bytes(8, "little"))

    def hash_elements(self, elements):
        return self.hash(elements_to_bytes(elements))

    def __repr__(self):
        return self.name

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))


class Blake3_256(Hasher):
    name = "blake3_256"

    def hash(self, data):
        return blake3.blake3(data).digest()


class Blake3_192(Hasher):
    """BLAKE3 출력을 24바이트로 자른 버전."""

    name = "blake3_192"
    DIGEST_SIZE = 24
    COLLISION_RESISTANCE = 96

    def hash(self, data):
        return blake3.blake3(data).digest(length=self.DIGEST_SIZE)


class Sha3_256(Hasher):
    name = "sha3_256"

    def hash(self, data):
        return hashlib.sha3_256(data).digest()


HASHERS = {cls.name: cls for cls in (Blake3_256, Blake3_192, Sha3_256)}


def get_hasher(name):
    try:
        return HASHERS[name]()
    except KeyError:
        raise ValueError(f"unknown hasher: {name}") from None
