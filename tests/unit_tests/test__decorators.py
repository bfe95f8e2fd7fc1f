import logging

import pytest

from storage_api.utils.decorators import log_execution_time


@log_execution_time
def add(a, b):
    return a + b


@log_execution_time
def explode():
    raise ValueError("boom")


def test__log_execution_time__logs_success(caplog):
    with caplog.at_level(logging.INFO, logger="storage_api.utils.decorators"):
        assert add(1, 2) == 3

    assert any("add completed in" in record.getMessage() for record in caplog.records)


def test__log_execution_time__logs_and_reraises_failure(caplog):
    with caplog.at_level(logging.INFO, logger="storage_api.utils.decorators"):
        with pytest.raises(ValueError, match="boom"):
            explode()

    assert any(
        record.levelno == logging.ERROR and "explode failed after" in record.getMessage() and "boom" in record.getMessage()
        for record in caplog.records
    )
    assert explode.__name__ == "explode"
