"""
MiMC Groth16 회로 (snark 백엔드) 테스트
"""
import pytest

from nizkp.errors import AssignmentMissing, ShapeMismatch
from nizkp.groth16 import Proof, create_proof
from nizkp.groth16.constraint_system import synthesize_for_proving, synthesize_for_setup
from nizkp.mimc.snark import Groth16MiMC, MiMCCircuit, SnarkArtifact

from conftest import SEED, SMALL_ROUNDS, flip_bit


# ─────────────────────────────────────────────────────────────────────
# 회로 형태
# ─────────────────────────────────────────────────────────────────────

class TestCircuitShape:
    def test_constraint_counts(self, snark_run):
        constants = snark_run["backend"].constants
        assembly = synthesize_for_setup(MiMCCircuit(None, None, constants, SMALL_ROUNDS))
        # ONE + image
        assert assembly.num_inputs == 2
        # xl, xr, tmp × R, new_xl × (R-1)
        assert assembly.num_aux == 2 + SMALL_ROUNDS + (SMALL_ROUNDS - 1)
        # 라운드당 2개 + 공개 입력 밀도 제약
        assert assembly.num_constraints == 2 * SMALL_ROUNDS + 2

    def test_public_constants_shape(self, snark_run):
        constants = snark_run["backend"].constants
        circuit = MiMCCircuit(None, None, constants, SMALL_ROUNDS, public_constants=True)
        assembly = synthesize_for_setup(circuit)
        assert assembly.num_inputs == 1 + SMALL_ROUNDS + 1

    def test_witness_satisfies(self, snark_run):
        backend = snark_run["backend"]
        prover = synthesize_for_proving(
            MiMCCircuit(backend.xl, backend.xr, backend.constants, SMALL_ROUNDS))
        assert prover.is_satisfied()
        # 마지막 공개 입력이 image
        assert prover.input_assignment[-1] == backend.image

    def test_shape_mismatch(self, snark_run):
        backend = snark_run["backend"]
        circuit = MiMCCircuit(backend.xl, backend.xr, backend.constants[:-1], SMALL_ROUNDS)
        with pytest.raises(ShapeMismatch) as info:
            synthesize_for_proving(circuit)
        assert info.value.expected == SMALL_ROUNDS
        assert info.value.actual == SMALL_ROUNDS - 1

    def test_missing_preimage_at_proving(self, snark_run):
        """파라미터 생성용 회로(xl = None)로 증명하면 AssignmentMissing."""
        backend = snark_run["backend"]
        circuit = MiMCCircuit(None, backend.xr, backend.constants, SMALL_ROUNDS)
        with pytest.raises(AssignmentMissing):
            create_proof(circuit, backend.params, backend.rng)


# ─────────────────────────────────────────────────────────────────────
# 증명과 검증
# ─────────────────────────────────────────────────────────────────────

class TestProveVerify:
    def test_accepts(self, snark_run):
        assert snark_run["backend"].verify(snark_run["artifact"])

    def test_tampered_image_rejected(self, snark_run):
        backend = snark_run["backend"]
        assert not backend.verify(snark_run["artifact"], image=flip_bit(backend.image))

    def test_tampered_constant_rejected(self, snark_run):
        backend = snark_run["backend"]
        constants = list(backend.constants)
        constants[3] = flip_bit(constants[3])
        assert not backend.verify(snark_run["artifact"], constants=constants)

    def test_proof_bytes(self, snark_run):
        backend = snark_run["backend"]
        artifact = snark_run["artifact"]
        data = artifact.proof.to_bytes()
        assert len(data) == 128
        restored = SnarkArtifact(Proof.from_bytes(data), artifact.image)
        assert backend.verify(restored)

    def test_metrics(self, snark_run):
        backend = snark_run["backend"]
        metrics = backend.proof_metrics(snark_run["artifact"])
        assert metrics.serialized_size == 128
        assert metrics.runtime_size > 0
        assert metrics.security_label() == "? conjectured, ? proven"
        assert metrics.extra["vk_serialized_size"] == 3 * 32 + 3 * 64 + 2 * 32
        assert metrics.extra["vk_uncompressed_size"] == 3 * 64 + 3 * 128 + 2 * 64
        assert metrics.extra["proof_uncompressed_size"] == 256
        assert metrics.extra["crs_uncompressed_size_without_vk"] == \
            2 * metrics.extra["crs_serialized_size_without_vk"]


class TestPublicConstants:
    @pytest.fixture(scope="class")
    def public_run(self):
        backend = Groth16MiMC(SMALL_ROUNDS, SEED, public_constants=True)
        backend.setup()
        return {"backend": backend, "artifact": backend.prove()}

    def test_accepts(self, public_run):
        assert public_run["backend"].verify(public_run["artifact"])

    def test_public_inputs_layout(self, public_run):
        backend = public_run["backend"]
        inputs = backend.public_inputs(backend.constants, backend.image)
        assert inputs == list(backend.constants) + [backend.image]

    def test_tampered_constant_rejected(self, public_run):
        backend = public_run["backend"]
        constants = list(backend.constants)
        constants[0] = flip_bit(constants[0])
        assert not backend.verify(public_run["artifact"], constants=constants)

    def test_same_setup_as_coefficient_mode(self, public_run, snark_run):
        """모드와 무관하게 같은 시드에서 같은 상수와 preimage가 나온다."""
        assert public_run["backend"].constants == snark_run["backend"].constants
        assert public_run["backend"].image == snark_run["backend"].image
