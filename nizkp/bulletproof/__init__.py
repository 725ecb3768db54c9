from nizkp.bulletproof.generators import BulletproofGens, BulletproofGensShare, PedersenGens
from nizkp.bulletproof.inner_product import InnerProductProof, inner_product
from nizkp.bulletproof.r1cs import (
    ConstraintSystem, LinearCombination, Prover, R1CSMetrics, R1CSProof, Variable, Verifier,
)
