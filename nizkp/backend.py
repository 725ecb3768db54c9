"""
MiMC 증명 백엔드 공통 인터페이스
================================

세 백엔드(bulletproof, Groth16, STARK)는 같은 수명 주기를 따른다.

  setup()                       시드로부터 상수/preimage/image와 키·생성자 구성 (시간 측정 제외)
  prove()                       증명 아티팩트 생성
  verify(artifact, ...)         bool 반환. constants/image를 넘기면 검증자 쪽 값만 바꿔서 검증
  proof_metrics(artifact)       ProofMetrics

run()은 setup과 한 번의 정확성 검사를 수행하고 지표를 반환한다.
"""

import logging
import sys
import types
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from nizkp.config import MIMC_ROUNDS, RANDOMNESS_SEED
from nizkp.errors import VerificationFailed
from nizkp.rng import SeededRng

logger = logging.getLogger(__name__)

_ATOMIC = (str, bytes, bytearray, int, float, bool, type, types.ModuleType, types.FunctionType)


@dataclass
class ProofMetrics:
    """증명 크기와 보안 수준.

    runtime_size: 파이썬 객체 그래프의 메모리 크기 (바이트)
    serialized_size: to_bytes() 길이 (바이트)
    conjectured_security / proven_security: 비트 단위, 백엔드가 보고하지 않으면 None
    extra: 백엔드별 추가 지표 (커밋먼트 크기, CRS 크기, 제약 수 등)
    """
    runtime_size: int
    serialized_size: int
    conjectured_security: Optional[int] = None
    proven_security: Optional[int] = None
    extra: dict = field(default_factory=dict)

    def security_label(self):
        if self.conjectured_security is None:
            return "? conjectured, ? proven"
        return f"{self.conjectured_security} conjectured, {self.proven_security} proven"


def runtime_size(obj, _seen=None):
    """객체와 그 객체가 참조하는 컨테이너/속성의 sys.getsizeof 합."""
    if _seen is None:
        _seen = set()
    if id(obj) in _seen:
        return 0
    _seen.add(id(obj))
    size = sys.getsizeof(obj)
    if obj is None or isinstance(obj, _ATOMIC):
        return size
    if isinstance(obj, dict):
        for k, v in obj.items():
            size += runtime_size(k, _seen) + runtime_size(v, _seen)
    elif isinstance(obj, (list, tuple, set, frozenset)):
        for item in obj:
            size += runtime_size(item, _seen)
    if hasattr(obj, "__dict__"):
        size += runtime_size(vars(obj), _seen)
    elif hasattr(obj, "__slots__"):
        for name in obj.__slots__:
            if hasattr(obj, name):
                size += runtime_size(getattr(obj, name), _seen)
    return size


class MiMCBackend(ABC):
    """MiMC preimage 지식 증명 백엔드."""

    name = "backend"

    def __init__(self, rounds=None, seed=None):
        self.rounds = MIMC_ROUNDS if rounds is None else rounds
        self.seed = RANDOMNESS_SEED if seed is None else bytes(seed)
        self.rng = SeededRng(self.seed)
        self.constants = None
        self.xl = None
        self.xr = None
        self.image = None
        self.is_setup = False

    @abstractmethod
    def setup(self):
        """상수, preimage, image 및 증명 파라미터를 준비한다."""

    @abstractmethod
    def prove(self):
        """증명 아티팩트를 생성한다."""

    @abstractmethod
    def verify(self, artifact, constants=None, image=None):
        """아티팩트를 검증한다. constants/image가 주어지면 검증자 쪽에서 그 값을 쓴다."""

    @abstractmethod
    def proof_metrics(self, artifact):
        """ProofMetrics를 반환한다."""

    def ensure_setup(self):
        if not self.is_setup:
            self.setup()
            self.is_setup = True

    def check(self, artifact):
        """정확성 검사: 거부되면 VerificationFailed."""
        if not self.verify(artifact):
            raise VerificationFailed(self.name)

    def run(self):
        self.ensure_setup()
        artifact = self.prove()
        self.check(artifact)
        metrics = self.proof_metrics(artifact)
        logger.info("%s: %d rounds, proof %d bytes serialized, security %s",
                    self.name, self.rounds, metrics.serialized_size, metrics.security_label())
        return metrics
