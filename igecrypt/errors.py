"""Errors raised by the IGE transform and its block cipher oracles"""
from enum import IntEnum


class ErrorCode(IntEnum):
    """
    Result codes returned by `igecrypt.aes_ige_transform`.

    Every failure kind has its own nonzero value so that callers
    which only look at the returned integer can still tell them apart.
    """
    OK = 0
    INVALID_LENGTH = 1
    INVALID_KEY_LENGTH = 2
    ORACLE_SETUP_FAILURE = 3
    BLOCK_OPERATION_FAILURE = 4
    INVALID_IV_LENGTH = 5


class IgeError(Exception):
    """Base class for every error raised while running the IGE transform."""
    code = None


class InvalidLengthError(IgeError, ValueError):
    """
    Occurs when the input length is not a multiple of the block size.
    Nothing has been done by the time this is raised.
    """
    code = ErrorCode.INVALID_LENGTH

    def __init__(self, length, block_size=16, message=None):
        super().__init__(message or (
            'The data length ({}) must be a multiple of {} bytes'
            .format(length, block_size)))

        self.length = length
        self.block_size = block_size


class InvalidKeyLengthError(IgeError, ValueError):
    """
    Occurs when the key is not 16, 24 or 32 bytes long, which means
    no AES variant can be selected for it.
    """
    code = ErrorCode.INVALID_KEY_LENGTH

    def __init__(self, key_length):
        super().__init__(
            'Invalid key length ({} bytes); only 16, 24 and 32-byte '
            'keys are supported'.format(key_length))

        self.key_length = key_length


class InvalidIvLengthError(IgeError, ValueError):
    """Occurs when the initialization vector is not exactly two blocks long."""
    code = ErrorCode.INVALID_IV_LENGTH

    def __init__(self, iv_length, expected=32):
        super().__init__(
            'The initialization vector must be {} bytes long, not {}'
            .format(expected, iv_length))

        self.iv_length = iv_length
        self.expected = expected


class OracleSetupError(IgeError):
    """
    Occurs when the underlying block cipher could not be created or keyed.
    No block has been processed and the IV is left untouched.
    """
    code = ErrorCode.ORACLE_SETUP_FAILURE

    def __init__(self, *args):
        if not args:
            args = ['The block cipher could not be set up.']
        super().__init__(*args)


class BlockOperationError(IgeError):
    """
    Occurs when encrypting or decrypting a single block failed halfway
    through the transform. The IV is never partially updated, but the
    contents of the output for the blocks not yet processed are undefined.
    """
    code = ErrorCode.BLOCK_OPERATION_FAILURE

    def __init__(self, index, reason=None):
        message = 'The block cipher failed on block {}'.format(index)
        if reason:
            message += ' ({})'.format(reason)
        super().__init__(message)

        self.index = index
        self.reason = reason
