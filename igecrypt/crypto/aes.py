"""
AES IGE implementation in Python.

The block cipher itself is provided by an oracle (see `oracle`) which
only ever sees one block at a time; all of the chaining is done here.

The 32-byte initialization vector is laid out as OpenSSL does it: the
first 16 bytes are the previous cipher text block and the last 16 bytes
the previous plain text block.
"""
import logging

from .oracle import Variant, open_oracle
from ..errors import (
    ErrorCode, IgeError, InvalidLengthError, InvalidKeyLengthError,
    InvalidIvLengthError, BlockOperationError
)

__log__ = logging.getLogger(__name__)

BLOCK_SIZE = 16
IV_SIZE = 2 * BLOCK_SIZE


def xor_block(a, b):
    """Byte-wise exclusive or of two 16-byte blocks."""
    if len(a) != BLOCK_SIZE or len(b) != BLOCK_SIZE:
        raise ValueError('can only xor blocks of {} bytes, not {} and {}'
                         .format(BLOCK_SIZE, len(a), len(b)))

    return bytes(x ^ y for x, y in zip(a, b))


def _is_writable(buffer):
    if isinstance(buffer, memoryview):
        return not buffer.readonly
    return isinstance(buffer, bytearray)


def _check(data, key, iv):
    if len(data) % BLOCK_SIZE != 0:
        raise InvalidLengthError(len(data), BLOCK_SIZE)

    variant = Variant.from_key_length(len(key))

    if len(iv) != IV_SIZE:
        raise InvalidIvLengthError(len(iv), IV_SIZE)

    return variant


def _chain(data, out, key, iv, encrypt, backend):
    """
    Runs the IGE recurrence over ``data`` writing the result into ``out``,
    which must be as long as ``data`` and may be the very same buffer.

    The IV is only written once every block has been processed.
    """
    variant = _check(data, key, iv)
    __log__.debug('%s %d block(s) with %s', 'Encrypting' if encrypt
                  else 'Decrypting', len(data) // BLOCK_SIZE, variant.name)

    iv1 = bytes(iv[:BLOCK_SIZE])
    iv2 = bytes(iv[BLOCK_SIZE:])

    with open_oracle(variant, key, backend) as oracle:
        for index, offset in enumerate(range(0, len(data), BLOCK_SIZE)):
            # Copy it, the output may be overwriting the input
            block = bytes(data[offset:offset + BLOCK_SIZE])
            try:
                if encrypt:
                    result = xor_block(
                        oracle.encrypt_block(xor_block(block, iv1)), iv2)
                else:
                    result = xor_block(
                        oracle.decrypt_block(xor_block(block, iv2)), iv1)
            except Exception as e:
                __log__.warning('Block %d failed with %r: %s',
                                index, oracle, e)
                raise BlockOperationError(index, str(e)) from e

            if encrypt:
                iv1, iv2 = result, block
            else:
                iv1, iv2 = block, result

            out[offset:offset + BLOCK_SIZE] = result

    if encrypt and data and _is_writable(iv):
        iv[:BLOCK_SIZE] = iv1
        iv[BLOCK_SIZE:] = iv2


def ige_transform(data, key, iv, encrypt, backend=None):
    """
    Encrypts or decrypts ``data`` in 16-bytes blocks by using the given
    key and 32-bytes initialization vector, returning the result as bytes.

    When encrypting, a mutable ``iv`` (such as a `bytearray`) is updated
    in place to the final chaining state, so that it can be used to keep
    encrypting more data. Decryption never modifies it.

    Raises a subclass of `IgeError` if the input can't be transformed.
    """
    out = bytearray(len(data))
    _chain(data, out, key, iv, encrypt, backend)
    return bytes(out)


def encrypt_ige(plain_text, key, iv, backend=None):
    """
    Encrypts the given text in 16-bytes blocks by using the
    given key and 32-bytes initialization vector.
    """
    return ige_transform(plain_text, key, iv, True, backend)


def decrypt_ige(cipher_text, key, iv, backend=None):
    """
    Decrypts the given text in 16-bytes blocks by using the
    given key and 32-bytes initialization vector.
    """
    return ige_transform(cipher_text, key, iv, False, backend)


def aes_ige_transform(input, output, length, key, key_length, iv, encrypt,
                      backend=None):
    """
    Buffer-oriented entry point, returning an `ErrorCode` instead of
    raising.

    The first ``length`` bytes of ``input`` are transformed into the
    caller-allocated, writable ``output`` (which may be ``input`` itself).
    Only the first ``key_length`` bytes of ``key`` are used. ``iv`` must be
    a writable 32-byte buffer, updated after a successful encryption.
    """
    if not _is_writable(output):
        raise TypeError('the output must be a writable buffer, not {}'
                        .format(type(output).__name__))

    try:
        if length < 0 or length > len(input) or length > len(output):
            raise InvalidLengthError(length, BLOCK_SIZE, (
                'The length ({}) does not fit in the input ({}) or output '
                '({}) buffers'.format(length, len(input), len(output))))
        if key_length < 0 or key_length > len(key):
            raise InvalidKeyLengthError(key_length)

        data = memoryview(input)[:length]
        out = memoryview(output)[:length]
        _chain(data, out, memoryview(key)[:key_length], iv, encrypt, backend)
    except IgeError as e:
        __log__.info('AES IGE transform failed: %s', e)
        return e.code

    return ErrorCode.OK


class AES:
    """
    Class that serves as an interface to encrypt and decrypt
    text through the AES IGE mode.
    """
    @staticmethod
    def decrypt_ige(cipher_text, key, iv, backend=None):
        """
        Decrypts the given text in 16-bytes blocks by using the
        given key and 32-bytes initialization vector.
        """
        return decrypt_ige(cipher_text, key, iv, backend)

    @staticmethod
    def encrypt_ige(plain_text, key, iv, backend=None):
        """
        Encrypts the given text in 16-bytes blocks by using the
        given key and 32-bytes initialization vector.
        """
        return encrypt_ige(plain_text, key, iv, backend)
