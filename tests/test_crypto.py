import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from cocoattest.crypto import HARDCODED_KEY, Algorithm, encrypt

PLAINTEXT = b"layer key material"


def test_parse_names():
    assert Algorithm.parse("A256GCM") is Algorithm.A256GCM
    assert Algorithm.parse("A256CTR") is Algorithm.A256CTR


def test_parse_is_case_sensitive():
    with pytest.raises(ValueError):
        Algorithm.parse("a256gcm")


def test_display():
    assert str(Algorithm.parse("A256GCM")) == "A256GCM"
    assert str(Algorithm.parse("A256CTR")) == "A256CTR"


def test_hardcoded_key_is_usable_as_256_bit_key():
    assert len(HARDCODED_KEY) == 32
    ciphertext = encrypt(PLAINTEXT, HARDCODED_KEY, bytes(16), Algorithm.A256CTR)
    assert len(ciphertext) == len(PLAINTEXT)
    assert encrypt(ciphertext, HARDCODED_KEY, bytes(16), Algorithm.A256CTR) == PLAINTEXT


def test_gcm_round_trip():
    iv = bytes(12)
    ciphertext = encrypt(PLAINTEXT, HARDCODED_KEY, iv, Algorithm.A256GCM)
    assert ciphertext[: len(PLAINTEXT)] != PLAINTEXT
    assert AESGCM(HARDCODED_KEY).decrypt(iv, ciphertext, None) == PLAINTEXT


def test_gcm_appends_tag():
    ciphertext = encrypt(PLAINTEXT, HARDCODED_KEY, bytes(12), Algorithm.A256GCM)
    assert len(ciphertext) == len(PLAINTEXT) + 16


def test_ctr_is_its_own_inverse():
    iv = bytes(range(16))
    ciphertext = encrypt(PLAINTEXT, HARDCODED_KEY, iv, Algorithm.A256CTR)
    assert len(ciphertext) == len(PLAINTEXT)
    assert ciphertext != PLAINTEXT
    assert encrypt(ciphertext, HARDCODED_KEY, iv, Algorithm.A256CTR) == PLAINTEXT


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_rejects_short_key(algorithm):
    iv = bytes(12 if algorithm is Algorithm.A256GCM else 16)
    with pytest.raises(ValueError):
        encrypt(PLAINTEXT, bytes(16), iv, algorithm)


def test_ctr_rejects_gcm_sized_iv():
    with pytest.raises(ValueError):
        encrypt(PLAINTEXT, HARDCODED_KEY, bytes(12), Algorithm.A256CTR)


def test_gcm_rejects_wrong_nonce():
    with pytest.raises(ValueError):
        encrypt(PLAINTEXT, HARDCODED_KEY, bytes(16), Algorithm.A256GCM)