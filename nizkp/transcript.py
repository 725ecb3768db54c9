"""
Fiat-Shamir Transcript
======================

bulletproof R1CS 증명의 비대화식 변환에 쓰는 레이블 기반 트랜스크립트.

**동작 방식**:
  Prover와 Verifier는 같은 순서로 커밋먼트와 도메인 구분자를 추가하고,
  같은 레이블로 챌린지를 뽑는다. 챌린지는 지금까지의 상태를 SHA-512로
  해싱하여 FR 원소로 축소한 값이며, 결과 해시는 다시 상태에 추가된다(체이닝).

**도메인 분리**:
  모든 메시지는 (레이블 길이, 레이블, 메시지 길이, 메시지) 순으로 기록하므로
  서로 다른 메시지 경계가 같은 바이트열을 만들 수 없다.

사용 예시:
    >>> t = Transcript(b"MiMCProof")
    >>> t.append_point(b"V", commitment)
    >>> y = t.challenge_scalar(b"y")
"""

import hashlib

from nizkp.ec import FR, CURVE_ORDER, compress_g1, is_inf
from nizkp.errors import R1CSError


class Transcript:
    """SHA-512 기반 Fiat-Shamir 트랜스크립트.

    속성:
        state: 현재까지 누적된 해시 입력 바이트열
    """

    def __init__(self, label=b"nizkp"):
        self.state = bytearray()
        self.append_message(b"dom-sep", label)

    def append_message(self, label, message):
        self.state.extend(len(label).to_bytes(4, "little"))
        self.state.extend(label)
        self.state.extend(len(message).to_bytes(4, "little"))
        self.state.extend(message)

    def append_u64(self, label, value):
        self.append_message(label, int(value).to_bytes(8, "little"))

    def append_scalar(self, label, scalar):
        self.append_message(label, (int(scalar) % CURVE_ORDER).to_bytes(32, "little"))

    def append_point(self, label, point):
        """G1 점(Jacobian) 또는 이미 압축된 32바이트 표현을 추가한다."""
        data = point if isinstance(point, (bytes, bytearray)) else compress_g1(point)
        self.append_message(label, bytes(data))

    def validate_and_append_point(self, label, point):
        """무한원점이면 R1CSError. 증명자가 보낸 커밋먼트에만 사용한다."""
        if is_inf(point):
            raise R1CSError(f"{label.decode()} is the identity point")
        self.append_point(label, point)

    def challenge_scalar(self, label):
        self.state.extend(len(label).to_bytes(4, "little"))
        self.state.extend(label)
        h = hashlib.sha512(bytes(self.state)).digest()
        self.state.extend(h[:32])
        return FR(int.from_bytes(h, "little") % CURVE_ORDER)

    # ── 프로토콜 도메인 구분자 ──

    def r1cs_domain_sep(self):
        self.append_message(b"dom-sep", b"r1cs v1")

    def r1cs_1phase_domain_sep(self):
        self.append_message(b"dom-sep", b"r1cs-1phase")

    def innerproduct_domain_sep(self, n):
        self.append_message(b"dom-sep", b"ipp v1")
        self.append_u64(b"n", n)
