"""
Merkle 트리 벡터 커밋먼트
=========================

리프 개수는 2의 거듭제곱이어야 한다 (LDE 도메인과 FRI 레이어 크기가 모두 그렇다).
levels[0]이 리프, levels[-1]이 루트 하나짜리 레벨이다.
"""

from nizkp.polynomial import is_power_of_two


class MerkleTree:
    def __init__(self, leaves, hasher):
        if not is_power_of_two(len(leaves)):
            raise ValueError(f"number of leaves must be a power of two: {len(leaves)}")
        self.hasher = hasher
        self.levels = [list(leaves)]
        while len(self.levels[-1]) > 1:
            prev = self.levels[-1]
            self.levels.append([hasher.merge(prev[i], prev[i + 1]) for i in range(0, len(prev), 2)])

    @property
    def root(self):
        return self.levels[-1][0]

    @property
    def depth(self):
        return len(self.levels) - 1

    def prove(self, index):
        """리프 index의 인증 경로 (리프 쪽 형제부터)."""
        path = []
        for level in self.levels[:-1]:
            path.append(level[index ^ 1])
            index >>= 1
        return path

    @staticmethod
    def verify(root, index, leaf, path, hasher):
        node = leaf
        for sibling in path:
            if index & 1:
                node = hasher.merge(sibling, node)
            else:
                node = hasher.merge(node, sibling)
            index >>= 1
        return index == 0 and node == root
