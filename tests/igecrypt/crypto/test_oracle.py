"""
Tests for `igecrypt.crypto.oracle`.
"""
import pytest

from igecrypt.crypto import libssl, oracle
from igecrypt.crypto.oracle import (
    LibsslOracle, PyaesOracle, Variant, get_backend, open_oracle
)
from igecrypt.errors import InvalidKeyLengthError, OracleSetupError

PLAIN_TEXT = bytes.fromhex('00112233445566778899aabbccddeeff')

# FIPS-197, appendix C
FIPS_VECTORS = [
    (bytes(range(16)), bytes.fromhex('69c4e0d86a7b0430d8cdb78070b4c55a')),
    (bytes(range(24)), bytes.fromhex('dda97ca4864cdfe06eaf70a0ec0d7191')),
    (bytes(range(32)), bytes.fromhex('8ea2b7ca516745bfeafc49904b496089')),
]

requires_libssl = pytest.mark.skipif(
    not LibsslOracle.is_available(), reason='libssl is not available')


@pytest.mark.parametrize('key_length,variant', [
    (16, Variant.AES128),
    (24, Variant.AES192),
    (32, Variant.AES256),
])
def test_variant_from_key_length(key_length, variant):
    assert Variant.from_key_length(key_length) is variant
    assert variant.key_size == key_length
    assert variant.bits == key_length * 8


@pytest.mark.parametrize('key_length', [0, 1, 10, 15, 17, 20, 31, 33, 64])
def test_variant_invalid_key_length(key_length):
    with pytest.raises(InvalidKeyLengthError) as e:
        Variant.from_key_length(key_length)

    assert e.value.key_length == key_length


@pytest.mark.parametrize('key,cipher_text', FIPS_VECTORS)
def test_pyaes_oracle(key, cipher_text):
    with open_oracle(Variant.from_key_length(len(key)), key, 'pyaes') as aes:
        assert isinstance(aes, PyaesOracle)
        assert aes.encrypt_block(PLAIN_TEXT) == cipher_text
        assert aes.decrypt_block(cipher_text) == PLAIN_TEXT

    assert aes.closed


@requires_libssl
@pytest.mark.parametrize('key,cipher_text', FIPS_VECTORS)
def test_libssl_oracle(key, cipher_text):
    with open_oracle(Variant.from_key_length(len(key)), key, 'libssl') as aes:
        assert isinstance(aes, LibsslOracle)
        assert aes.encrypt_block(PLAIN_TEXT) == cipher_text
        assert aes.decrypt_block(cipher_text) == PLAIN_TEXT


def test_libssl_oracle_unavailable(monkeypatch):
    monkeypatch.setattr(libssl, 'encrypt_block', None)
    with pytest.raises(OracleSetupError):
        open_oracle(Variant.AES128, bytes(16), 'libssl')


def test_open_oracle_key_mismatch():
    opened = []

    def backend(variant):
        opened.append(PyaesOracle(variant))
        return opened[-1]

    with pytest.raises(OracleSetupError) as e:
        open_oracle(Variant.AES256, bytes(16), backend)

    assert isinstance(e.value.__cause__, ValueError)
    assert len(opened) == 1 and opened[0].closed


def test_open_oracle_construction_failure():
    def backend(variant):
        raise RuntimeError('no cipher for you')

    with pytest.raises(OracleSetupError) as e:
        open_oracle(Variant.AES128, bytes(16), backend)

    assert isinstance(e.value.__cause__, RuntimeError)


def test_closed_oracle():
    aes = open_oracle(Variant.AES128, bytes(16), 'pyaes')
    aes.close()
    aes.close()
    assert aes.closed
    assert 'closed' in repr(aes)

    with pytest.raises(ValueError):
        aes.encrypt_block(PLAIN_TEXT)
    with pytest.raises(ValueError):
        aes.decrypt_block(PLAIN_TEXT)


def test_wrong_block_length():
    with open_oracle(Variant.AES128, bytes(16), 'pyaes') as aes:
        with pytest.raises(ValueError):
            aes.encrypt_block(bytes(15))


def test_get_backend_default(monkeypatch):
    monkeypatch.delenv(oracle.BACKEND_ENV, raising=False)
    assert get_backend() is PyaesOracle


def test_get_backend_from_environment(monkeypatch):
    monkeypatch.setenv(oracle.BACKEND_ENV, 'PyAES')
    assert get_backend() is PyaesOracle

    monkeypatch.setenv(oracle.BACKEND_ENV, 'nope')
    with pytest.raises(ValueError):
        get_backend()


def test_get_backend_auto(monkeypatch):
    expected = LibsslOracle if LibsslOracle.is_available() else PyaesOracle
    assert get_backend('auto') is expected

    monkeypatch.setattr(libssl, 'decrypt_block', None)
    assert get_backend('auto') is PyaesOracle


def test_get_backend_custom():
    assert get_backend(PyaesOracle) is PyaesOracle
    assert get_backend('libssl') is LibsslOracle
    with pytest.raises(ValueError):
        get_backend('des')


def test_open_oracle_unknown_backend(monkeypatch):
    monkeypatch.setenv(oracle.BACKEND_ENV, 'bogus')
    with pytest.raises(OracleSetupError) as e:
        open_oracle(Variant.AES128, bytes(16))

    assert isinstance(e.value.__cause__, ValueError)
