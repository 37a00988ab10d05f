"""
AES in Infinite Garble Extension (IGE) mode, built on top of
single-block AES primitives.
"""
from .crypto import (
    AES, BLOCK_SIZE, IV_SIZE, BlockCipherOracle, LibsslOracle, PyaesOracle,
    Variant, aes_ige_transform, decrypt_ige, encrypt_ige, ige_transform,
    open_oracle, xor_block
)
from .errors import (
    ErrorCode, IgeError, InvalidLengthError, InvalidKeyLengthError,
    InvalidIvLengthError, OracleSetupError, BlockOperationError
)
from . import version

__version__ = version.__version__

__all__ = [
    'AES', 'BLOCK_SIZE', 'IV_SIZE', 'BlockCipherOracle', 'LibsslOracle',
    'PyaesOracle', 'Variant', 'aes_ige_transform', 'decrypt_ige',
    'encrypt_ige', 'ige_transform', 'open_oracle', 'xor_block',
    'ErrorCode', 'IgeError', 'InvalidLengthError', 'InvalidKeyLengthError',
    'InvalidIvLengthError', 'OracleSetupError', 'BlockOperationError'
]
