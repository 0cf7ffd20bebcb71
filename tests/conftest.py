import pytest

from scalar_aad import use_graph


@pytest.fixture
def graph():
    """A fresh graph installed as the current graph for the test."""
    with use_graph() as g:
        yield g
