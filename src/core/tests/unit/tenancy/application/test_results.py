"""Unit tests for OperationResult."""

import pytest

from tenancy.application.results import OperationResult
from tenancy.ports.exceptions import DuplicateNamespaceError

DUPLICATE = 'ERROR 42P06 (duplicate_schema): schema "lala" already exists'


def test_success_unpacks_to_ok_and_detail():
    status, detail = OperationResult.success([20160711125401])

    assert status == "ok"
    assert detail == [20160711125401]


def test_failure_unpacks_to_error_and_native_text():
    error = DuplicateNamespaceError(DUPLICATE, pgcode="42P06")

    result = OperationResult.failure(error)

    assert tuple(result) == ("error", DUPLICATE)
    assert result.error is error
    assert not result.ok


def test_unwrap_returns_detail_of_success():
    assert OperationResult.success("lala").unwrap() == "lala"


def test_unwrap_raises_error_of_failure():
    result = OperationResult.failure(DuplicateNamespaceError(DUPLICATE))

    with pytest.raises(DuplicateNamespaceError):
        result.unwrap()
