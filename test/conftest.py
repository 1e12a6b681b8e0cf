import os
from unittest import mock

import pytest

from acr_replicator.common.config import CONFIG_KEYS


@pytest.fixture(scope="function", autouse=True)
def clean_configuration_env():
    """Remove replication settings from the environment so that tests only
    see the configuration they set explicitly.
    """
    with mock.patch.dict(os.environ):
        for key in CONFIG_KEYS.values():
            os.environ.pop(key, None)
        yield
