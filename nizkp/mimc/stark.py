"""
MiMC STARK (AIR + trace)
========================

trace 폭 3 (xl, xr, c), 길이 n = R + 1 (2의 거듭제곱, 8 이상).

  row 0     = (xl, xr, c_0)
  row i + 1 = (xr_i + (xl_i + c_i)^3, xl_i, c_{i+1})     마지막 행의 c는 0

전이 제약 (차수 [3, 1], R과 무관):
    next_xl - (xr + (xl + c)^3)
    next_xr - xl

경계 제약:
    xl@0 = xl,  xr@0 = xr,  xl@(n-1) = image

라운드 상수는 AIR 제약에 들어가지 않고 공개 입력으로 coin 시드에 묶인다.
"""

import logging
from dataclasses import dataclass

from nizkp.backend import MiMCBackend, ProofMetrics, runtime_size
from nizkp.config import (
    STARK_BLOWUP_FACTOR, STARK_FRI_FOLDING_FACTOR, STARK_FRI_REMAINDER_MAX_DEGREE,
    STARK_GRINDING_FACTOR, STARK_NUM_QUERIES, is_valid_stark_round_count,
)
from nizkp.errors import ConfigurationError
from nizkp.mimc import generate_constants, generate_preimage, mimc
from nizkp.stark import (
    Air, AirContext, Assertion, Blake3_256, FieldExtension, OptionSet, ProofOptions, Prover,
    StarkProof, TraceTable, TransitionConstraintDegree, verify,
)
from nizkp.stark.air import MIN_TRACE_LENGTH, are_equal
from nizkp.stark.field import BaseElement

logger = logging.getLogger(__name__)

TRACE_WIDTH = 3


def default_options():
    return ProofOptions(
        STARK_NUM_QUERIES,
        STARK_BLOWUP_FACTOR,
        STARK_GRINDING_FACTOR,
        FieldExtension.NONE,
        STARK_FRI_FOLDING_FACTOR,
        STARK_FRI_REMAINDER_MAX_DEGREE,
    )


@dataclass
class PublicInputs:
    xl: BaseElement
    xr: BaseElement
    result: BaseElement
    round_constants: list

    def to_elements(self):
        return [self.xl, self.xr, self.result] + list(self.round_constants)


class MiMCAir(Air):
    def __init__(self, trace_info, pub_inputs, options):
        super().__init__(trace_info, pub_inputs, options)
        if trace_info.width != TRACE_WIDTH:
            raise ConfigurationError(f"MiMC trace must have {TRACE_WIDTH} columns, got {trace_info.width}")
        degrees = [
            TransitionConstraintDegree(3),
            TransitionConstraintDegree(1),
        ]
        self._context = AirContext(trace_info, degrees, 3, options)
        self.xl = pub_inputs.xl
        self.xr = pub_inputs.xr
        self.result = pub_inputs.result

    @property
    def context(self):
        return self._context

    def evaluate_transition(self, frame, result):
        current_xl, current_xr, current_ci = frame.current
        next_xl, next_xr = frame.next[0], frame.next[1]

        expected_xl = current_xr + (current_xl + current_ci).cube()
        expected_xr = current_xl

        result[0] += are_equal(next_xl, expected_xl)
        result[1] += are_equal(next_xr, expected_xr)

    def get_assertions(self):
        last_step = self.trace_length - 1
        return [
            Assertion.single(0, 0, self.xl),
            Assertion.single(1, 0, self.xr),
            Assertion.single(0, last_step, self.result),
        ]


class MiMCProver(Prover):
    air_cls = MiMCAir

    def build_trace(self, xl, xr, round_constants):
        rounds = len(round_constants)
        trace_length = rounds + 1
        if not is_valid_stark_round_count(rounds):
            raise ConfigurationError(
                f"{rounds} MiMC rounds give a trace of {trace_length} rows; "
                f"the row count must be a power of two and at least {MIN_TRACE_LENGTH}")

        trace = TraceTable(TRACE_WIDTH, trace_length)

        def init(state):
            state[0] = xl
            state[1] = xr
            state[2] = round_constants[0]

        def update(step, state):
            xl_i, xr_i, ci = state
            state[0] = xr_i + (xl_i + ci).cube()
            state[1] = xl_i
            state[2] = round_constants[step + 1] if step < rounds - 1 else BaseElement.zero()

        trace.fill(init, update)
        return trace

    def get_pub_inputs(self, trace):
        last_step = trace.length - 1
        return PublicInputs(
            xl=trace.get(0, 0),
            xr=trace.get(1, 0),
            result=trace.get(0, last_step),
            round_constants=[trace.get(2, i) for i in range(last_step)],
        )


def random_element(rng):
    return BaseElement(rng.next_u64())


@dataclass
class StarkArtifact:
    proof: StarkProof


class StarkMiMC(MiMCBackend):
    """STARK 백엔드.

    Args:
        options: ProofOptions (기본값은 nizkp.config의 STARK_* 상수)
        hasher: 해시 전략 객체 (기본값 Blake3_256)
        acceptable_options: verifier 정책 (기본값 OptionSet([options]))
    """

    name = "stark"

    def __init__(self, rounds=None, seed=None, options=None, hasher=None, acceptable_options=None):
        super().__init__(rounds, seed)
        self.options = default_options() if options is None else options
        self.hasher = Blake3_256() if hasher is None else hasher
        self.acceptable_options = (
            OptionSet([self.options]) if acceptable_options is None else acceptable_options
        )
        self.prover = MiMCProver(self.options, self.hasher)

    def setup(self):
        self.constants = generate_constants(self.rng, self.rounds, random_element)
        self.xl, self.xr = generate_preimage(self.rng, random_element)
        self.image = mimc(self.xl, self.xr, self.constants)
        self.is_setup = True

    def prove(self):
        self.ensure_setup()
        trace = self.prover.build_trace(self.xl, self.xr, self.constants)
        return StarkArtifact(self.prover.prove(trace))

    def public_inputs(self, constants=None, image=None):
        return PublicInputs(
            xl=self.xl,
            xr=self.xr,
            result=self.image if image is None else image,
            round_constants=self.constants if constants is None else constants,
        )

    def verify(self, artifact, constants=None, image=None):
        return verify(
            artifact.proof,
            self.public_inputs(constants, image),
            self.acceptable_options,
            MiMCAir,
            self.hasher,
        )

    def proof_metrics(self, artifact):
        proof = artifact.proof
        return ProofMetrics(
            runtime_size=runtime_size(proof),
            serialized_size=len(proof.to_bytes()),
            conjectured_security=proof.security_level(self.hasher, conjectured=True),
            proven_security=proof.security_level(self.hasher, conjectured=False),
            extra={
                "hasher": self.hasher.name,
                "lde_domain_size": proof.lde_domain_size,
                "fri_layers": len(proof.fri_roots),
                "queries": len(proof.trace_queries),
            },
        )
