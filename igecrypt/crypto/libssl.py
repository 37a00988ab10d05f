"""
Helper module around the system's libssl library if available, exposing
its single-block AES primitives (no chaining mode is used from it).
"""
import ctypes
import ctypes.util
import logging
import sys

__log__ = logging.getLogger(__name__)

# The AES primitives live in libcrypto, but libssl links against it
# so either of them will do.
_LIBRARY_NAMES = ('crypto', 'ssl')


def _find_ssl_lib():
    for name in _LIBRARY_NAMES:
        lib = ctypes.util.find_library(name)
        # Recent macOS versions abort on the unversioned system stubs
        if not lib or sys.platform == 'darwin' and lib.endswith(
                'lib{}.dylib'.format(name)):
            continue

        try:
            return ctypes.cdll.LoadLibrary(lib)
        except OSError as e:
            __log__.debug('Could not load %s: %s', lib, e)

    raise OSError('no usable library called {} found'
                  .format(' or '.join(map(repr, _LIBRARY_NAMES))))


try:
    _libssl = _find_ssl_lib()
    # Builds without the deprecated low-level API lack these
    _libssl.AES_encrypt.restype = None
    _libssl.AES_decrypt.restype = None
except (OSError, AttributeError) as e:
    __log__.info('Failed to load SSL library: %s (%s)', type(e), e)
    _libssl = None

if not _libssl:
    AES_KEY = None
    set_encrypt_key = None
    set_decrypt_key = None
    encrypt_block = None
    decrypt_block = None
else:
    # https://github.com/openssl/openssl/blob/master/include/openssl/aes.h
    AES_MAXNR = 14

    class AES_KEY(ctypes.Structure):
        """Helper class representing an expanded AES key"""
        _fields_ = [
            ('rd_key', ctypes.c_uint32 * (4 * (AES_MAXNR + 1))),
            ('rounds', ctypes.c_uint),
        ]

    def _set_key(function, key):
        aes_key = AES_KEY()
        bits = ctypes.c_int(8 * len(key))
        key = (ctypes.c_ubyte * len(key))(*key)

        # 0 on success, -1 for a null pointer and -2 for a bad size
        result = function(key, bits, ctypes.byref(aes_key))
        if result != 0:
            raise ValueError('AES key schedule failed with code {}'
                             .format(result))
        return aes_key

    def set_encrypt_key(key):
        return _set_key(_libssl.AES_set_encrypt_key, key)

    def set_decrypt_key(key):
        return _set_key(_libssl.AES_set_decrypt_key, key)

    def _run_block(function, block, aes_key):
        if len(block) != 16:
            raise ValueError('wrong block length')

        in_ptr = (ctypes.c_ubyte * 16)(*block)
        out_ptr = (ctypes.c_ubyte * 16)()
        function(ctypes.byref(in_ptr), ctypes.byref(out_ptr),
                 ctypes.byref(aes_key))

        return bytes(out_ptr)

    def encrypt_block(block, aes_key):
        return _run_block(_libssl.AES_encrypt, block, aes_key)

    def decrypt_block(block, aes_key):
        return _run_block(_libssl.AES_decrypt, block, aes_key)
