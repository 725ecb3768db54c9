"""
벤치마크 기본 설정
==================

세 가지 백엔드가 공유하는 기본값을 정의한다. 모든 컴포넌트는 라운드 수와
시드를 생성자 인자로 받으므로, 아래 상수는 CLI/HTTP 계층의 기본값으로만 쓰인다.

  MIMC_ROUNDS     = 255 (2^8 - 1, STARK trace 길이 256)
  RANDOMNESS_SEED = 32바이트의 24
  SAMPLES         = 50 (시간 측정 반복 횟수)
"""

from dataclasses import dataclass, field

from nizkp.errors import ConfigurationError
from nizkp.polynomial import next_power_of_two
from nizkp.stark.air import MIN_TRACE_LENGTH


MIMC_ROUNDS = 255
RANDOMNESS_SEED = bytes([24] * 32)
SAMPLES = 50

# STARK 증명 파라미터 기본값
STARK_NUM_QUERIES = 42
STARK_BLOWUP_FACTOR = 8
STARK_GRINDING_FACTOR = 16
STARK_FRI_FOLDING_FACTOR = 8
STARK_FRI_REMAINDER_MAX_DEGREE = 31

BACKENDS = ("snark", "stark", "bulletproof")


def is_valid_round_count(rounds):
    """R = 2^k - 1 (k >= 1) 형태인지 확인한다."""
    return rounds >= 1 and (rounds + 1) & rounds == 0


def is_valid_stark_round_count(rounds):
    """STARK trace는 R+1행이고 2의 거듭제곱, 최소 MIN_TRACE_LENGTH행이어야 한다."""
    return is_valid_round_count(rounds) and rounds + 1 >= MIN_TRACE_LENGTH


def gens_capacity(rounds):
    """R 라운드 MiMC 가젯에 충분한 bulletproof 생성자 용량.

    가젯은 곱셈 게이트 2R개를 쓰고 증명 시 2의 거듭제곱으로 패딩된다.
    R = 2^k - 1이면 (R+1)·2와 같다.
    """
    return max((rounds + 1) * 2, next_power_of_two(2 * rounds))


@dataclass
class BenchmarkConfig:
    """벤치마크 실행 설정."""
    rounds: int = MIMC_ROUNDS
    samples: int = SAMPLES
    seed: bytes = RANDOMNESS_SEED
    backends: tuple = BACKENDS
    stark_options: dict = field(default_factory=dict)

    def validate(self) -> None:
        if self.rounds < 1:
            raise ConfigurationError("rounds must be positive")
        if self.samples < 0:
            raise ConfigurationError("samples must not be negative")
        if len(self.seed) != 32:
            raise ConfigurationError("seed must be exactly 32 bytes")
        for name in self.backends:
            if name not in BACKENDS:
                raise ConfigurationError(f"unknown backend: {name}")
        if "stark" in self.backends and not is_valid_stark_round_count(self.rounds):
            raise ConfigurationError(
                f"stark needs rounds + 1 to be a power of two of at least {MIN_TRACE_LENGTH}, got {self.rounds}")
