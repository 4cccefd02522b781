import logging

import pytest
import structlog

from mdtoggle.buffer import TextBuffer
from mdtoggle.engine import FormatEngine


@pytest.fixture(autouse=True)
def quiet_structlog():
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING))
    yield
    structlog.reset_defaults()


@pytest.fixture
def buffer():
    return TextBuffer()


@pytest.fixture
def editor(buffer):
    return FormatEngine(buffer)
