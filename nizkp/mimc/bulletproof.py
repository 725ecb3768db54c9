"""
MiMC R1CS 가젯 (bulletproof)
============================

Prover와 Verifier가 같은 가젯 코드로 같은 제약 그래프를 만든다.

라운드당 곱셈 게이트 2개:
    (l, _, l_sqr) = multiply(xl + c_i, xl + c_i)
    (_, _, l_cube) = multiply(l_sqr, l)
    xl, xr = l_cube + xr, xl

마지막 xl 선형결합은 image 스칼라와 같아야 한다 (image는 별도 공개 입력 없이
제약 상수항으로 들어간다). 공개 입력은 xl, xr의 Pedersen 커밋먼트 두 개이다.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from nizkp.backend import MiMCBackend, ProofMetrics, runtime_size
from nizkp.bulletproof.generators import BulletproofGens, PedersenGens
from nizkp.bulletproof.r1cs import LinearCombination, Prover, Variable, Verifier
from nizkp.config import gens_capacity
from nizkp.ec import FR
from nizkp.errors import ConfigurationError
from nizkp.mimc import generate_constants, generate_preimage, mimc
from nizkp.transcript import Transcript

logger = logging.getLogger(__name__)

TRANSCRIPT_LABEL = b"MiMC"


@dataclass
class AllocatedScalar:
    """변수와 (Prover 쪽에서만 있는) 값."""
    variable: Variable
    assignment: Optional[FR] = None


def mimc_hash_2(cs, left, right, rounds, constants):
    left_v = LinearCombination.of(left)
    right_v = LinearCombination.of(right)

    for j in range(rounds):
        left_plus_const = left_v + constants[j]
        l, _, l_sqr = cs.multiply(left_plus_const, left_plus_const)
        _, _, l_cube = cs.multiply(l_sqr, l)

        tmp = LinearCombination.from_var(l_cube) + right_v
        right_v = left_v
        left_v = tmp

    return left_v


def constrain_lc_with_scalar(cs, lc, scalar):
    """lc - scalar == 0"""
    cs.constrain(LinearCombination.of(lc) - scalar)


def mimc_gadget(cs, left, right, rounds, constants, image):
    res_v = mimc_hash_2(cs, left.variable, right.variable, rounds, constants)
    constrain_lc_with_scalar(cs, res_v, image)


def random_fr(rng):
    return FR(rng.random_scalar(FR.field_modulus))


@dataclass
class BulletproofArtifact:
    proof: object
    commitments: tuple


class BulletproofMiMC(MiMCBackend):
    """bulletproof R1CS 백엔드.

    Args:
        rounds: MiMC 라운드 수
        seed: 32바이트 시드
        capacity: 생성자 용량 (기본값 gens_capacity(R)). 패딩된 곱셈 게이트 수보다 작으면
            setup에서 ConfigurationError.
    """

    name = "bulletproof"

    def __init__(self, rounds=None, seed=None, capacity=None):
        super().__init__(rounds, seed)
        self.capacity = gens_capacity(self.rounds) if capacity is None else capacity
        self.pc_gens = None
        self.bp_gens = None

    def setup(self):
        required = gens_capacity(self.rounds)
        if self.capacity < required:
            raise ConfigurationError(
                f"generator capacity {self.capacity} is below {required} for {self.rounds} rounds"
            )
        self.constants = generate_constants(self.rng, self.rounds, random_fr)
        self.pc_gens = PedersenGens()
        self.bp_gens = BulletproofGens(self.capacity, 1)
        self.xl, self.xr = generate_preimage(self.rng, random_fr)
        self.image = mimc(self.xl, self.xr, self.constants)
        self.is_setup = True

    def prove(self):
        self.ensure_setup()
        prover = Prover(self.pc_gens, Transcript(TRANSCRIPT_LABEL), self.rng)

        com_l, var_l = prover.commit(self.xl, random_fr(self.rng))
        com_r, var_r = prover.commit(self.xr, random_fr(self.rng))
        mimc_gadget(
            prover,
            AllocatedScalar(var_l, self.xl),
            AllocatedScalar(var_r, self.xr),
            self.rounds,
            self.constants,
            self.image,
        )
        logger.debug("MiMC hash with %d rounds has prover metrics %s", self.rounds, prover.metrics())
        proof = prover.prove(self.bp_gens)
        return BulletproofArtifact(proof, (com_l, com_r))

    def verify(self, artifact, constants=None, image=None):
        constants = self.constants if constants is None else constants
        image = self.image if image is None else image

        verifier = Verifier(Transcript(TRANSCRIPT_LABEL))
        var_l = verifier.commit(artifact.commitments[0])
        var_r = verifier.commit(artifact.commitments[1])
        mimc_gadget(
            verifier,
            AllocatedScalar(var_l),
            AllocatedScalar(var_r),
            self.rounds,
            constants,
            image,
        )
        logger.debug("MiMC hash with %d rounds has verifier metrics %s", self.rounds, verifier.metrics())
        return verifier.verify(artifact.proof, self.pc_gens, self.bp_gens)

    def proof_metrics(self, artifact):
        return ProofMetrics(
            runtime_size=runtime_size(artifact.proof),
            serialized_size=artifact.proof.serialized_size(),
            extra={
                "commitments_runtime_size": runtime_size(artifact.commitments),
                "commitments_serialized_size": sum(len(c) for c in artifact.commitments),
                "generators_capacity": self.capacity,
            },
        )
