# tests/conftest.py
import pytest

from pymona.Mona import NO_VALUE, SourcePos, State


@pytest.fixture
def initial_state():
    def _make(input_data, user_state=None):
        return State(NO_VALUE, input_data, 0, SourcePos(1, 0, "test"), user_state)

    return _make
