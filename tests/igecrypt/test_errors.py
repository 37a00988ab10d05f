"""
Tests for `igecrypt.errors`.
"""
import pytest

from igecrypt import errors
from igecrypt.errors import ErrorCode


@pytest.mark.parametrize('error,code', [
    (errors.InvalidLengthError(17), ErrorCode.INVALID_LENGTH),
    (errors.InvalidKeyLengthError(20), ErrorCode.INVALID_KEY_LENGTH),
    (errors.InvalidIvLengthError(16), ErrorCode.INVALID_IV_LENGTH),
    (errors.OracleSetupError(), ErrorCode.ORACLE_SETUP_FAILURE),
    (errors.BlockOperationError(3), ErrorCode.BLOCK_OPERATION_FAILURE),
])
def test_error_codes(error, code):
    assert isinstance(error, errors.IgeError)
    assert error.code == code
    assert error.code != ErrorCode.OK
    assert str(error)


def test_error_codes_are_distinct():
    assert len(set(ErrorCode)) == len(ErrorCode.__members__)
    assert ErrorCode.OK == 0


def test_value_errors():
    assert isinstance(errors.InvalidLengthError(1), ValueError)
    assert isinstance(errors.InvalidKeyLengthError(1), ValueError)
    assert not isinstance(errors.OracleSetupError(), ValueError)


def test_messages():
    assert '17' in str(errors.InvalidLengthError(17))
    assert str(errors.InvalidLengthError(5, message='too big')) == 'too big'
    assert str(errors.BlockOperationError(2, 'boom')) \
        == 'The block cipher failed on block 2 (boom)'
    assert str(errors.OracleSetupError('nope')) == 'nope'
