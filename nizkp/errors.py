"""
증명 시스템 공통 예외
=====================

두 가지 오류 계열을 구분한다.

**구성/형태 오류 (ConfigurationError, SynthesisError)**:
  생성자 용량 부족, trace 길이가 2의 거듭제곱이 아님, 라운드 상수 길이 불일치,
  증명 합성 중 witness 누락 등. 증명 생성 전이나 도중에 감지되며 복구하지 않는다.

**검증 결과**:
  검증 함수는 bool을 반환한다. 벤치마크 하니스의 정확성 검사 단계에서
  거부가 발생하면 VerificationFailed를 발생시킨다.
"""


class ConfigurationError(ValueError):
    """증명 파라미터 또는 회로 형태가 잘못된 경우."""


class SynthesisError(Exception):
    """Groth16 회로 합성 실패."""


class AssignmentMissing(SynthesisError):
    """증명 합성 중 witness 값이 없는 경우."""

    def __init__(self, name=None):
        msg = "assignment missing" if name is None else f"assignment missing: {name}"
        super().__init__(msg)


class ShapeMismatch(SynthesisError):
    """라운드 상수 개수가 컴파일된 라운드 수와 다른 경우."""

    def __init__(self, expected, actual):
        super().__init__(f"expected {expected} round constants, got {actual}")
        self.expected = expected
        self.actual = actual


class R1CSError(Exception):
    """Bulletproof R1CS 증명의 구조가 잘못된 경우 (검증 경계에서 False로 변환)."""


class VerificationFailed(AssertionError):
    """정확성 검사 단계에서 정직한 증명이 거부된 경우."""

    def __init__(self, backend):
        super().__init__(f"{backend}: proof was rejected during the correctness pass")
        self.backend = backend


class VerifierError(Exception):
    """STARK 증명의 구조 또는 일관성 검사 실패 (검증 경계에서 False로 변환)."""
