"""
This module contains the AES IGE mode and the single-block
AES oracles it is built upon.
"""
from .aes import (
    AES, BLOCK_SIZE, IV_SIZE, aes_ige_transform, decrypt_ige, encrypt_ige,
    ige_transform, xor_block
)
from .oracle import (
    BACKENDS, BlockCipherOracle, LibsslOracle, PyaesOracle, Variant,
    get_backend, open_oracle
)
