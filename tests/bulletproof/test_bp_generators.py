from nizkp.bulletproof.generators import BulletproofGens, PedersenGens
from nizkp.ec import FR, G1, ec_add, ec_eq, ec_mul


class TestPedersenGens:
    def test_commit(self):
        pc = PedersenGens()
        expected = ec_add(ec_mul(G1, 7), ec_mul(pc.B_blinding, 11))
        assert ec_eq(pc.commit(FR(7), FR(11)), expected)

    def test_homomorphic(self):
        pc = PedersenGens()
        total = ec_add(pc.commit(FR(2), FR(3)), pc.commit(FR(5), FR(4)))
        assert ec_eq(total, pc.commit(FR(7), FR(7)))

    def test_blinding_base_differs(self):
        assert not ec_eq(PedersenGens().B, PedersenGens().B_blinding)


class TestBulletproofGens:
    def test_capacity(self):
        gens = BulletproofGens(4, 1)
        assert gens.gens_capacity == 4
        assert len(gens.share(0).G(4)) == 4
        assert len(gens.share(0).H(2)) == 2

    def test_increase_keeps_prefix(self):
        gens = BulletproofGens(2)
        first = gens.share(0).G(2)
        gens.increase_capacity(4)
        assert gens.gens_capacity == 4
        assert all(ec_eq(a, b) for a, b in zip(first, gens.share(0).G(2)))

    def test_shrink_is_noop(self):
        gens = BulletproofGens(4)
        gens.increase_capacity(2)
        assert gens.gens_capacity == 4

    def test_g_and_h_are_independent(self):
        share = BulletproofGens(2).share(0)
        assert not ec_eq(share.G(1)[0], share.H(1)[0])

    def test_deterministic(self):
        a = BulletproofGens(3).share(0).H(3)
        b = BulletproofGens(3).share(0).H(3)
        assert all(ec_eq(x, y) for x, y in zip(a, b))
