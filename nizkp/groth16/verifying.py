import logging

from nizkp.ec import FR, ec_add, ec_mul, final_exponentiate, miller_loop

logger = logging.getLogger(__name__)


def public_input_accumulator(ic, public_inputs):
    acc = ic[0]
    for x, point in zip(public_inputs, ic[1:]):
        acc = ec_add(acc, ec_mul(point, FR(x)))
    return acc


# e(A, B) == e(α, β) · e(Σ x_i·ic_i, γ) · e(C, δ)
def verify_proof(pvk, proof, public_inputs):
    if len(public_inputs) + 1 != len(pvk.ic):
        logger.info("groth16 proof rejected: expected %d public inputs, got %d",
                    len(pvk.ic) - 1, len(public_inputs))
        return False

    acc = public_input_accumulator(pvk.ic, public_inputs)

    lhs = miller_loop(proof.b, proof.a)
    lhs = lhs * miller_loop(pvk.neg_gamma_g2, acc)
    lhs = lhs * miller_loop(pvk.neg_delta_g2, proof.c)

    if final_exponentiate(lhs) != pvk.alpha_g1_beta_g2:
        logger.info("groth16 proof rejected: pairing check failed")
        return False
    return True
