import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from nizkp.config import RANDOMNESS_SEED
from nizkp.mimc.bulletproof import BulletproofMiMC
from nizkp.mimc.snark import Groth16MiMC
from nizkp.mimc.stark import StarkMiMC


# ── 테스트 상수 ──
# 전체 255 라운드는 느리므로 STARK 조건(R+1이 2의 거듭제곱, 8 이상)을 만족하는 작은 R을 쓴다.
SMALL_ROUNDS = 7
MEDIUM_ROUNDS = 15
SEED = RANDOMNESS_SEED


def flip_bit(element, bit=0):
    """원소의 정수 표현에서 한 비트를 뒤집은 같은 타입의 원소 (변조 시나리오용)."""
    return type(element)(int(element) ^ (1 << bit))


@pytest.fixture(scope="session")
def bulletproof_run():
    """setup + 증명 한 번 (R = 7)."""
    backend = BulletproofMiMC(SMALL_ROUNDS, SEED)
    backend.setup()
    artifact = backend.prove()
    return {"backend": backend, "artifact": artifact}


@pytest.fixture(scope="session")
def snark_run():
    backend = Groth16MiMC(SMALL_ROUNDS, SEED)
    backend.setup()
    artifact = backend.prove()
    return {"backend": backend, "artifact": artifact}


@pytest.fixture(scope="session")
def stark_run():
    backend = StarkMiMC(SMALL_ROUNDS, SEED)
    backend.setup()
    artifact = backend.prove()
    return {"backend": backend, "artifact": artifact}
