"""Tests for the logging configuration model.

LoggingConfigModel validation is tested here. The init_logging function
is exercised through the CLI tests.
"""

from __future__ import annotations

import pytest
from lib_layered_config import Config

from acs_mailer import __init__conf__
from acs_mailer.adapters.logging.setup import (
    LoggingConfigModel,
    _build_runtime_config,  # pyright: ignore[reportPrivateUsage]
)


@pytest.mark.os_agnostic
def test_logging_config_model_allows_extra_fields() -> None:
    """Extra fields pass through for lib_log_rich RuntimeConfig."""
    parsed = LoggingConfigModel.model_validate({"service": "mailer", "environment": "dev", "console_level": "DEBUG"})

    assert parsed.service == "mailer"
    assert parsed.environment == "dev"
    extra = parsed.model_dump(exclude={"service", "environment"}, exclude_none=True)
    assert extra == {"console_level": "DEBUG"}


@pytest.mark.os_agnostic
def test_logging_config_model_defaults() -> None:
    parsed = LoggingConfigModel.model_validate({})

    assert parsed.service is None
    assert parsed.environment == "prod"


@pytest.mark.os_agnostic
def test_runtime_config_falls_back_to_package_name() -> None:
    runtime_config = _build_runtime_config(Config({"azure_mailer": {}}, {}))

    assert runtime_config.service == __init__conf__.name
    assert runtime_config.environment == "prod"


@pytest.mark.os_agnostic
def test_runtime_config_reads_the_lib_log_rich_section() -> None:
    config = Config({"lib_log_rich": {"service": "mail-relay", "environment": "test"}}, {})

    runtime_config = _build_runtime_config(config)

    assert runtime_config.service == "mail-relay"
    assert runtime_config.environment == "test"
