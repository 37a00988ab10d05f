"""
Single-block AES "oracles" used by the IGE transform.

An oracle is keyed once and only ever encrypts or decrypts one block at
a time, in electronic codebook fashion. The chaining is done by the caller.

The backend is chosen per call, from either the ``backend`` argument or
the ``IGECRYPT_BACKEND`` environment variable (``pyaes``, ``libssl`` or
``auto``). If neither is given, the pure Python ``pyaes`` is used.
"""
import logging
import os
from abc import ABC, abstractmethod
from enum import Enum

import pyaes

from . import libssl
from ..errors import InvalidKeyLengthError, OracleSetupError

__log__ = logging.getLogger(__name__)

BACKEND_ENV = 'IGECRYPT_BACKEND'
DEFAULT_BACKEND = 'pyaes'

if libssl.encrypt_block and libssl.decrypt_block:
    __log__.info('libssl detected, it can be used for the block cipher')
else:
    __log__.info('libssl not found, only pyaes can be used for the block cipher')


class Variant(Enum):
    """The AES variant, which depends solely on the length of the key."""
    AES128 = 16
    AES192 = 24
    AES256 = 32

    @property
    def key_size(self):
        return self.value

    @property
    def bits(self):
        return self.value * 8

    @classmethod
    def from_key_length(cls, key_length):
        """
        Returns the variant for a key of the given length in bytes,
        or raises `InvalidKeyLengthError` if there is none.
        """
        try:
            return cls(key_length)
        except ValueError:
            raise InvalidKeyLengthError(key_length) from None


class BlockCipherOracle(ABC):
    """
    Interface to encrypt and decrypt single 16-byte blocks with a fixed
    AES variant. Instances are meant to be short-lived: they are created,
    keyed, used for one transform and closed, so they can also be used
    as context managers.
    """
    name = None

    def __init__(self, variant):
        self.variant = variant
        self.closed = False

    @classmethod
    def is_available(cls):
        """Whether this backend can be used on the current system."""
        return True

    @abstractmethod
    def set_key(self, key):
        """
        Installs the key to be used by the following block operations.
        Its length must match the variant the oracle was opened with.
        """
        raise NotImplementedError

    @abstractmethod
    def encrypt_block(self, block):
        """Encrypts a single 16-byte block and returns the result as bytes."""
        raise NotImplementedError

    @abstractmethod
    def decrypt_block(self, block):
        """Decrypts a single 16-byte block and returns the result as bytes."""
        raise NotImplementedError

    def close(self):
        """
        Releases the key material held by the oracle. Calling
        this more than once has no effect.
        """
        self.closed = True

    def _check_key(self, key):
        if len(key) != self.variant.key_size:
            raise ValueError('{} needs a {}-byte key, not {}'.format(
                self.variant.name, self.variant.key_size, len(key)))

    def _check_open(self):
        if self.closed:
            raise ValueError('block operation on a closed oracle')

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self):
        return '<{} {}{}>'.format(
            type(self).__name__, self.variant.name,
            ' (closed)' if self.closed else '')


class PyaesOracle(BlockCipherOracle):
    """Oracle backed by the pure Python implementation of ``pyaes``."""
    name = 'pyaes'

    def __init__(self, variant):
        super().__init__(variant)
        self._aes = None

    def set_key(self, key):
        self._check_key(key)
        self._aes = pyaes.AES(bytes(key))

    def encrypt_block(self, block):
        self._check_open()
        return bytes(self._aes.encrypt(list(block)))

    def decrypt_block(self, block):
        self._check_open()
        return bytes(self._aes.decrypt(list(block)))

    def close(self):
        self._aes = None
        super().close()


class LibsslOracle(BlockCipherOracle):
    """Oracle backed by the system's OpenSSL through ``ctypes``."""
    name = 'libssl'

    def __init__(self, variant):
        if not self.is_available():
            raise OracleSetupError('libssl is not available on this system')

        super().__init__(variant)
        self._encrypt_key = None
        self._decrypt_key = None

    @classmethod
    def is_available(cls):
        return bool(libssl.encrypt_block and libssl.decrypt_block)

    def set_key(self, key):
        self._check_key(key)
        key = bytes(key)
        self._encrypt_key = libssl.set_encrypt_key(key)
        self._decrypt_key = libssl.set_decrypt_key(key)

    def encrypt_block(self, block):
        self._check_open()
        return libssl.encrypt_block(block, self._encrypt_key)

    def decrypt_block(self, block):
        self._check_open()
        return libssl.decrypt_block(block, self._decrypt_key)

    def close(self):
        self._encrypt_key = None
        self._decrypt_key = None
        super().close()


BACKENDS = {
    PyaesOracle.name: PyaesOracle,
    LibsslOracle.name: LibsslOracle,
}


def get_backend(backend=None):
    """
    Returns the oracle class to be used for the given ``backend``.

    It can be the name of a known backend, ``'auto'`` (libssl if it's
    available, pyaes otherwise), an oracle class or any other callable
    taking a `Variant` and returning an oracle. If it's `None`, the
    ``IGECRYPT_BACKEND`` environment variable is used instead.
    """
    if backend is None:
        backend = os.environ.get(BACKEND_ENV) or DEFAULT_BACKEND

    if not isinstance(backend, str):
        return backend

    name = backend.strip().lower()
    if name == 'auto':
        return LibsslOracle if LibsslOracle.is_available() else PyaesOracle

    try:
        return BACKENDS[name]
    except KeyError:
        raise ValueError('Unknown block cipher backend {!r}; expected one '
                         'of {}'.format(backend, ', '.join(
                             sorted(BACKENDS) + ['auto']))) from None


def open_oracle(variant, key, backend=None):
    """
    Creates an oracle for ``variant`` and installs ``key`` in it.

    Any failure while doing so is raised as `OracleSetupError`,
    and the oracle is closed before raising if it was created.
    """
    try:
        cls = get_backend(backend)
    except ValueError as e:
        __log__.warning('Could not pick a block cipher backend: %s', e)
        raise OracleSetupError(str(e)) from e

    try:
        oracle = cls(variant)
    except OracleSetupError:
        raise
    except Exception as e:
        __log__.warning('Could not create %s oracle: %s', variant.name, e)
        raise OracleSetupError('Could not create the {} block cipher: {}'
                               .format(variant.name, e)) from e

    try:
        oracle.set_key(key)
    except Exception as e:
        oracle.close()
        __log__.warning('Could not set the key of %r: %s', oracle, e)
        if isinstance(e, OracleSetupError):
            raise
        raise OracleSetupError('Could not set the {} key: {}'
                               .format(variant.name, e)) from e

    __log__.debug('Opened %r', oracle)
    return oracle
