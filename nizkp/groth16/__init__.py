from nizkp.groth16.constraint_system import (
    Circuit, ConstraintSystem, LinearCombination, Variable, ONE,
)
from nizkp.groth16.setup import (
    Parameters, VerifyingKey, PreparedVerifyingKey, generate_parameters, prepare_verifying_key,
)
from nizkp.groth16.proving import Proof, create_proof
from nizkp.groth16.verifying import verify_proof
