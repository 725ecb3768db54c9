"""
FRI 저차 다항식 검사
====================

레이어 l의 평가값 f_l (도메인 크기 M_l, 오프셋 g_l, 생성자 ω_l)을 k개씩 묶어
M_l / k 개의 행으로 커밋한다.

    row j = [f_l(x_0 · ζ^t) for t in 0..k-1],  x_0 = g_l · ω_l^j,  ζ = ω_l^{M_l/k}

f(x) = Σ_s x^s · f_s(x^k) 일 때 다음 레이어는 f'(y) = Σ_s α^s · f_s(y).
행 값의 역 DFT가 u_s = x_0^s · f_s(y) 이므로 f'(y) = Σ_s u_s · (α / x_0)^s 이다.

차수 상한 d가 remainder_max_degree + 1 이하가 되면 접기를 멈추고, 마지막 레이어를
계수(나머지 다항식)로 보낸다.

위치 p는 레이어마다 (p mod M_l/k)로 옮겨 가며, 행 안에서의 위치는 p // (M_l/k) 이다.
"""

import logging

from nizkp.errors import ConfigurationError, VerifierError
from nizkp.polynomial import coset_ifft, evaluate, get_root_of_unity, ifft
from nizkp.stark.field import BaseElement
from nizkp.stark.merkle import MerkleTree
from nizkp.stark.proof import Queries

logger = logging.getLogger(__name__)


def num_fri_layers(domain_size, degree_bound, options):
    """(레이어 수, 나머지 다항식 차수 상한)."""
    k = options.fri_folding_factor
    layers = 0
    while degree_bound > options.fri_remainder_max_degree + 1:
        if domain_size < k:
            raise ConfigurationError(
                f"FRI domain of size {domain_size} is too small for folding factor {k}")
        domain_size //= k
        degree_bound = max(1, degree_bound // k)
        layers += 1
    return layers, degree_bound


def fold_row(row, x0, alpha, zeta):
    return evaluate(ifft(row, zeta), alpha / x0)


def _rows(evaluations, k):
    row_count = len(evaluations) // k
    return [[evaluations[j + t * row_count] for t in range(k)] for j in range(row_count)]


class FriProver:
    def __init__(self, options, hasher, field):
        self.options = options
        self.hasher = hasher
        self.field = field
        self.layers = []
        self.remainder = None

    def build_layers(self, evaluations, degree_bound, domain, coin):
        """커밋 단계. 레이어 루트마다 coin을 재시드하고 α를 뽑는다."""
        k = self.options.fri_folding_factor
        zeta = get_root_of_unity(BaseElement, k)
        num_layers, remainder_bound = num_fri_layers(len(evaluations), degree_bound, self.options)

        offset, omega = domain.offset, domain.lde_generator
        for _ in range(num_layers):
            rows = _rows(evaluations, k)
            tree = MerkleTree([self.hasher.hash_elements(row) for row in rows], self.hasher)
            self.layers.append((tree, rows))
            coin.reseed(tree.root)
            alpha = coin.draw(self.field)

            x0 = offset
            folded = []
            for row in rows:
                folded.append(fold_row(row, x0, alpha, zeta))
                x0 = x0 * omega
            evaluations = folded
            offset, omega = offset ** k, omega ** k

        self.remainder = coset_ifft(evaluations, omega, offset)[:remainder_bound]
        coin.reseed(self.hasher.hash_elements(self.remainder))
        logger.debug("fri: %d layers, remainder of %d coefficients", num_layers, len(self.remainder))

    @property
    def roots(self):
        return [tree.root for tree, _ in self.layers]

    def build_queries(self, positions):
        queries = []
        for tree, rows in self.layers:
            row_count = len(rows)
            positions = sorted({p % row_count for p in positions})
            layer = Queries()
            for j in positions:
                layer.add(rows[j], tree.prove(j))
            queries.append(layer)
        return queries


class FriVerifier:
    """FRI 커밋먼트로 transcript를 재현하고, 쿼리 위치의 접기 일관성을 확인한다."""

    def __init__(self, proof, domain, degree_bound, options, hasher, field, coin):
        self.options = options
        self.hasher = hasher
        self.domain = domain
        self.roots = proof.fri_roots
        self.remainder = proof.fri_remainder
        self.layer_queries = proof.fri_queries

        num_layers, self.remainder_bound = num_fri_layers(domain.lde_size, degree_bound, options)
        if len(self.roots) != num_layers or len(self.layer_queries) != num_layers:
            raise VerifierError(f"expected {num_layers} FRI layers, got {len(self.roots)}")
        if len(self.remainder) > self.remainder_bound:
            raise VerifierError(
                f"FRI remainder has {len(self.remainder)} coefficients, at most {self.remainder_bound} allowed")

        self.alphas = []
        for root in self.roots:
            if len(root) != hasher.DIGEST_SIZE:
                raise VerifierError("FRI layer root has the wrong digest size")
            coin.reseed(root)
            self.alphas.append(coin.draw(field))
        coin.reseed(hasher.hash_elements(self.remainder))

    def verify(self, positions, evaluations):
        """positions[i]에서의 첫 레이어 값 evaluations[i]가 저차 다항식과 일치하는지 확인한다."""
        k = self.options.fri_folding_factor
        zeta = get_root_of_unity(BaseElement, k)
        domain_size = self.domain.lde_size
        offset, omega = self.domain.offset, self.domain.lde_generator

        values = dict(zip(positions, evaluations))
        for depth, (root, alpha, queries) in enumerate(zip(self.roots, self.alphas, self.layer_queries)):
            row_count = domain_size // k
            row_indices = sorted({p % row_count for p in values})
            if len(queries) != len(row_indices):
                raise VerifierError(f"FRI layer {depth}: expected {len(row_indices)} openings")

            rows = {}
            for j, row, path in zip(row_indices, queries.rows, queries.paths):
                if len(row) != k:
                    raise VerifierError(f"FRI layer {depth}: row {j} has {len(row)} values")
                if not MerkleTree.verify(root, j, self.hasher.hash_elements(row), path, self.hasher):
                    raise VerifierError(f"FRI layer {depth}: Merkle path for row {j} is invalid")
                rows[j] = row

            for p, value in values.items():
                if rows[p % row_count][p // row_count] != value:
                    raise VerifierError(f"FRI layer {depth}: evaluation at position {p} does not match")

            values = {
                j: fold_row(rows[j], offset * omega ** j, alpha, zeta)
                for j in row_indices
            }
            domain_size = row_count
            offset, omega = offset ** k, omega ** k

        for p, value in values.items():
            if evaluate(self.remainder, offset * omega ** p) != value:
                raise VerifierError(f"FRI remainder does not match at position {p}")
