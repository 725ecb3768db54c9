"""
Bulletproof 생성자 (Pedersen / 벡터 커밋먼트용)
================================================

**PedersenGens**:
  값 v와 블라인딩 r에 대한 커밋먼트 V = v·B + r·B̃.
  B는 G1 생성자, B̃는 해시-투-커브로 만든 점이라 두 점 사이의 이산로그를 아무도 모른다.

**BulletproofGens**:
  R1CS 증명의 벡터 커밋먼트에 쓰이는 G_vec, H_vec. 용량(gens_capacity)은
  패딩된 곱셈 게이트 수 이상이어야 한다. MiMC 가젯은 라운드당 게이트 2개를
  쓰므로 (R+1)·2면 충분하다.

사용 예시:
    >>> pc_gens = PedersenGens()
    >>> bp_gens = BulletproofGens(gens_capacity=512, party_capacity=1)
    >>> V = pc_gens.commit(FR(7), FR(11))
"""

from nizkp.ec import G1, ec_add, ec_mul, hash_to_g1


class PedersenGens:
    """V = value·B + blinding·B_blinding"""

    def __init__(self, B=None, B_blinding=None):
        self.B = G1 if B is None else B
        self.B_blinding = hash_to_g1(b"nizkp-pedersen-blinding") if B_blinding is None else B_blinding

    def commit(self, value, blinding):
        return ec_add(ec_mul(self.B, value), ec_mul(self.B_blinding, blinding))


class BulletproofGens:
    """파티별 G_vec/H_vec 생성자 집합.

    속성:
        gens_capacity: 파티당 생성자 개수
        party_capacity: 파티 수 (R1CS 증명은 파티 1개만 사용)
    """

    def __init__(self, gens_capacity, party_capacity=1):
        self.gens_capacity = 0
        self.party_capacity = party_capacity
        self.G_vec = [[] for _ in range(party_capacity)]
        self.H_vec = [[] for _ in range(party_capacity)]
        self.increase_capacity(gens_capacity)

    def increase_capacity(self, new_capacity):
        if self.gens_capacity >= new_capacity:
            return
        for j in range(self.party_capacity):
            party = j.to_bytes(4, "little")
            for i in range(self.gens_capacity, new_capacity):
                self.G_vec[j].append(hash_to_g1(b"G" + party, i))
                self.H_vec[j].append(hash_to_g1(b"H" + party, i))
        self.gens_capacity = new_capacity

    def share(self, j):
        return BulletproofGensShare(self, j)


class BulletproofGensShare:
    """파티 j의 생성자에 대한 뷰."""

    def __init__(self, gens, share):
        self.gens = gens
        self.share = share

    def G(self, n):
        return self.gens.G_vec[self.share][:n]

    def H(self, n):
        return self.gens.H_vec[self.share][:n]
