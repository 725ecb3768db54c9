"""
Groth16 파라미터 생성 → 증명 → 검증 (작은 회로)
"""
import pytest

from nizkp.ec import FR
from nizkp.errors import SynthesisError
from nizkp.groth16 import (
    Proof, create_proof, generate_parameters, prepare_verifying_key, verify_proof,
)
from nizkp.groth16.constraint_system import Circuit, LinearCombination
from nizkp.groth16.proving import compute_h
from nizkp.rng import SeededRng

from test_g16_constraint_system import CubeCircuit


class WrongSquareCircuit(Circuit):
    """CubeCircuit과 같은 형태, x_sq만 틀린 witness (3^2 != 10)."""

    def synthesize(self, cs):
        x = cs.alloc("x", lambda: FR(3))
        x_sq = cs.alloc("x_sq", lambda: FR(10))
        out = cs.alloc_input("out", lambda: FR(35))
        cs.enforce("x*x", x, x, x_sq)
        cs.enforce("x_sq*x", x_sq, x, LinearCombination.of(out) - x - 5)


@pytest.fixture(scope="module")
def cube_setup():
    rng = SeededRng(bytes(32))
    params = generate_parameters(CubeCircuit(), rng)
    pvk = prepare_verifying_key(params.vk)
    proof = create_proof(CubeCircuit(FR(3)), params, rng)
    return {"params": params, "pvk": pvk, "proof": proof}


class TestParameters:
    def test_query_sizes(self, cube_setup):
        params = cube_setup["params"]
        # 제약 4개 → 도메인 4, h는 m-1개
        assert len(params.h) == 3
        assert len(params.vk.ic) == 2
        assert len(params.l) == 2
        assert len(params.a) == len(params.b_g1) == len(params.b_g2) == 4

    def test_serialized_sizes(self, cube_setup):
        params = cube_setup["params"]
        assert params.vk.serialized_size() == len(params.vk.to_bytes())
        assert params.serialized_size_without_vk() == (3 + 2 + 4 + 4) * 32 + 4 * 64
        assert params.serialized_size_without_vk(compressed=False) == (3 + 2 + 4 + 4) * 64 + 4 * 128
        assert params.vk.serialized_size(compressed=False) == 2 * params.vk.serialized_size()

    def test_deterministic(self, cube_setup):
        again = generate_parameters(CubeCircuit(), SeededRng(bytes(32)))
        assert again.vk.to_bytes() == cube_setup["params"].vk.to_bytes()


class TestProof:
    def test_accepts(self, cube_setup):
        assert verify_proof(cube_setup["pvk"], cube_setup["proof"], [FR(35)])

    def test_wrong_public_input(self, cube_setup):
        assert not verify_proof(cube_setup["pvk"], cube_setup["proof"], [FR(36)])

    def test_wrong_input_count(self, cube_setup):
        assert not verify_proof(cube_setup["pvk"], cube_setup["proof"], [FR(35), FR(1)])

    def test_serialization(self, cube_setup):
        data = cube_setup["proof"].to_bytes()
        assert len(data) == Proof.SIZE == 128
        assert verify_proof(cube_setup["pvk"], Proof.from_bytes(data), [FR(35)])

    def test_bad_length(self):
        with pytest.raises(ValueError):
            Proof.from_bytes(b"\x00" * 127)

    def test_other_witness_other_statement(self, cube_setup):
        """x = 4 → out = 73"""
        proof = create_proof(CubeCircuit(FR(4)), cube_setup["params"], SeededRng(bytes(32)))
        assert verify_proof(cube_setup["pvk"], proof, [FR(73)])
        assert not verify_proof(cube_setup["pvk"], proof, [FR(35)])

    def test_unsatisfied_witness_names_constraint(self, cube_setup):
        with pytest.raises(SynthesisError, match="constraint 0"):
            create_proof(WrongSquareCircuit(), cube_setup["params"], SeededRng(bytes(32)))


class TestComputeH:
    def test_satisfied(self):
        # a·b = c 가 모든 점에서 성립
        a = [FR(2), FR(3), FR(0), FR(0)]
        b = [FR(5), FR(7), FR(0), FR(0)]
        c = [FR(10), FR(21), FR(0), FR(0)]
        assert len(compute_h(a, b, c, 4)) == 3

    def test_unsatisfied(self):
        a = [FR(2), FR(3)]
        b = [FR(5), FR(7)]
        c = [FR(10), FR(22)]
        with pytest.raises(SynthesisError):
            compute_h(a, b, c, 2)
