"""
MiMC Groth16 회로 (zk-SNARK)
============================

라운드 i마다 제약 두 개:
    tmp    = (xl + c_i)^2                 : (xl + c_i) · (xl + c_i) = tmp
    new_xl = xr + (xl + c_i)^3            : tmp · (xl + c_i) = new_xl - xr

마지막 라운드의 new_xl만 공개 입력("image")으로 할당한다.

**두 단계 수명 주기**:
  1. 파라미터 생성: xl = xr = None으로 합성 (값 클로저는 호출되지 않음)
  2. 증명: xl, xr을 채워 합성. 값이 없으면 AssignmentMissing

**public_constants 모드**:
  라운드 상수를 제약 계수 대신 공개 입력 변수로 할당한다. 이 경우 CRS 하나가
  상수와 무관하게 재사용되고, 검증자는 constants + [image]를 공개 입력으로 넘긴다.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from nizkp.backend import MiMCBackend, ProofMetrics, runtime_size
from nizkp.ec import FR
from nizkp.errors import AssignmentMissing, ShapeMismatch
from nizkp.groth16.constraint_system import Circuit, LinearCombination
from nizkp.groth16.proving import Proof, create_proof
from nizkp.groth16.setup import generate_parameters, prepare_verifying_key
from nizkp.groth16.verifying import verify_proof
from nizkp.mimc import generate_constants, generate_preimage, mimc
from nizkp.rng import SeededRng

logger = logging.getLogger(__name__)


def _require(value, name):
    def fn():
        if value is None:
            raise AssignmentMissing(name)
        return value
    return fn


class MiMCCircuit(Circuit):
    """R 라운드 MiMC 회로. xl/xr가 None이면 파라미터 생성용."""

    def __init__(self, xl, xr, constants, rounds, public_constants=False):
        self.xl = xl
        self.xr = xr
        self.constants = constants
        self.rounds = rounds
        self.public_constants = public_constants

    def synthesize(self, cs):
        if len(self.constants) != self.rounds:
            raise ShapeMismatch(self.rounds, len(self.constants))

        if self.public_constants:
            round_constants = [
                cs.alloc_input(f"constant {i}", _require(c, f"constant {i}"))
                for i, c in enumerate(self.constants)
            ]
        else:
            round_constants = [cs.one() * c for c in self.constants]

        xl_value = self.xl
        xl = cs.alloc("preimage xl", _require(xl_value, "preimage xl"))
        xr_value = self.xr
        xr = cs.alloc("preimage xr", _require(xr_value, "preimage xr"))

        for i in range(self.rounds):
            with cs.namespace(f"round {i}"):
                c_i = self.constants[i]
                xl_plus_c = LinearCombination.of(xl) + round_constants[i]

                tmp_value = None if xl_value is None else (xl_value + c_i) * (xl_value + c_i)
                tmp = cs.alloc(cs.path("tmp"), _require(tmp_value, "tmp"))
                cs.enforce(cs.path("tmp = (xL + Ci)^2"), xl_plus_c, xl_plus_c, tmp)

                new_xl_value = None
                if xl_value is not None and xr_value is not None:
                    new_xl_value = tmp_value * (xl_value + c_i) + xr_value

                if i == self.rounds - 1:
                    new_xl = cs.alloc_input("image", _require(new_xl_value, "image"))
                else:
                    new_xl = cs.alloc(cs.path("new_xl"), _require(new_xl_value, "new_xl"))

                cs.enforce(cs.path("new_xL = xR + (xL + Ci)^3"), tmp, xl_plus_c,
                           LinearCombination.of(new_xl) - xr)

                xr, xr_value = xl, xl_value
                xl, xl_value = new_xl, new_xl_value


def random_fr(rng):
    return FR(rng.random_scalar(FR.field_modulus))


@dataclass
class SnarkArtifact:
    proof: Proof
    image: FR


class Groth16MiMC(MiMCBackend):
    """Groth16 백엔드.

    rng 순서: 라운드 상수 → CRS toxic waste → preimage → 증명 난수.
    """

    name = "snark"

    def __init__(self, rounds=None, seed=None, public_constants=False):
        super().__init__(rounds, seed)
        self.public_constants = public_constants
        self.params = None
        self.pvk = None
        self._tampered_keys = {}

    def setup(self):
        self.constants = generate_constants(self.rng, self.rounds, random_fr)
        self.params = self._generate_crs(self.constants, self.rng)
        self.pvk = prepare_verifying_key(self.params.vk)
        self.xl, self.xr = generate_preimage(self.rng, random_fr)
        self.image = mimc(self.xl, self.xr, self.constants)
        self.is_setup = True

    def _generate_crs(self, constants, rng):
        circuit = MiMCCircuit(None, None, constants, self.rounds, self.public_constants)
        return generate_parameters(circuit, rng)

    def prove(self):
        self.ensure_setup()
        circuit = MiMCCircuit(self.xl, self.xr, self.constants, self.rounds, self.public_constants)
        proof = create_proof(circuit, self.params, self.rng)
        return SnarkArtifact(proof, self.image)

    def public_inputs(self, constants, image):
        if self.public_constants:
            return list(constants) + [image]
        return [image]

    def verifying_key_for(self, constants):
        """검증자가 쓰는 prepared key.

        상수가 계수로 들어가는 모드에서 상수가 바뀌면 회로 자체가 바뀌므로,
        같은 시드 스트림으로 toxic waste를 다시 뽑아 바뀐 회로의 키를 만든다.
        """
        if self.public_constants or constants == self.constants:
            return self.pvk
        key = tuple(int(c) for c in constants)
        if key not in self._tampered_keys:
            rng = SeededRng(self.seed)
            generate_constants(rng, self.rounds, random_fr)
            params = self._generate_crs(constants, rng)
            self._tampered_keys[key] = prepare_verifying_key(params.vk)
        return self._tampered_keys[key]

    def verify(self, artifact, constants=None, image=None):
        constants = self.constants if constants is None else constants
        image = artifact.image if image is None else image
        pvk = self.verifying_key_for(constants)
        return verify_proof(pvk, artifact.proof, self.public_inputs(constants, image))

    def proof_metrics(self, artifact):
        return ProofMetrics(
            runtime_size=runtime_size(artifact.proof),
            serialized_size=len(artifact.proof.to_bytes()),
            extra={
                "crs_runtime_size": runtime_size(self.params),
                "proof_uncompressed_size": Proof.UNCOMPRESSED_SIZE,
                "crs_serialized_size_without_vk": self.params.serialized_size_without_vk(),
                "crs_uncompressed_size_without_vk": self.params.serialized_size_without_vk(compressed=False),
                "vk_serialized_size": self.params.vk.serialized_size(),
                "vk_uncompressed_size": self.params.vk.serialized_size(compressed=False),
            },
        )
