from nizkp.stark.field import BaseElement, QuadExtElement, FieldExtension, extension_field
from nizkp.stark.hashers import Blake3_192, Blake3_256, Sha3_256, get_hasher
from nizkp.stark.options import (
    ProofOptions, AcceptableOptions, OptionSet, MinConjecturedSecurity, MinProvenSecurity,
)
from nizkp.stark.air import Air, AirContext, Assertion, EvaluationFrame, TraceInfo, TransitionConstraintDegree
from nizkp.stark.trace import TraceTable
from nizkp.stark.proof import StarkProof
from nizkp.stark.prover import Prover
from nizkp.stark.verifier import verify
