import pytest

from nizkp.stark.field import BaseElement
from nizkp.stark.hashers import HASHERS, Blake3_192, Blake3_256, Sha3_256, get_hasher


class TestHashers:
    @pytest.mark.parametrize("cls, size, bits", [
        (Blake3_256, 32, 128),
        (Blake3_192, 24, 96),
        (Sha3_256, 32, 128),
    ])
    def test_digest_sizes(self, cls, size, bits):
        hasher = cls()
        assert len(hasher.hash(b"abc")) == size == cls.DIGEST_SIZE
        assert cls.COLLISION_RESISTANCE == bits

    def test_blake3_192_is_prefix_of_256(self):
        """BLAKE3 확장 출력이므로 앞 24바이트가 같다."""
        assert Blake3_192().hash(b"abc") == Blake3_256().hash(b"abc")[:24]

    def test_merge_with_int(self):
        hasher = Sha3_256()
        digest = hasher.hash(b"seed")
        assert hasher.merge_with_int(digest, 5) == hasher.hash(digest + (5).to_bytes(8, "little"))

    def test_hash_elements(self):
        hasher = Blake3_256()
        elements = [BaseElement(1), BaseElement(2)]
        assert hasher.hash_elements(elements) == hasher.hash(b"".join(e.to_bytes() for e in elements))

    def test_registry(self):
        assert set(HASHERS) == {"blake3_256", "blake3_192", "sha3_256"}
        assert get_hasher("sha3_256") == Sha3_256()
        assert Blake3_256() != Blake3_192()

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_hasher("md5")
