import logging

import pytest


@pytest.fixture(autouse=True)
def _restore_docgen_logger():
    """Keep logger state set by CLI tests from leaking into later tests."""
    log = logging.getLogger("docgen")
    level, handlers = log.level, list(log.handlers)
    yield
    log.setLevel(level)
    log.handlers[:] = handlers
