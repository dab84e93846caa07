# tests/conftest.py
"""
Shared Test Fixtures

Files that USE this module:
- pytest (fixtures are injected into every test module)

Files that this module USES:
- commission_builder.domain.default_catalog (built-in catalog as test data)
- commission_builder.domain.models (SelectionState, FileRef)
"""
import pytest  # Testing framework for writing and running tests

from collections import OrderedDict  # Ordered add-on selections

from commission_builder.domain.default_catalog import build_default_catalog  # Realistic catalog
from commission_builder.domain.models import FileRef, SelectionState, Step  # Selection test data


@pytest.fixture
def catalog():
    return build_default_catalog()


def _files(count: int) -> list:
    return [FileRef(name=f"ref{i}.png", size=1000 + i, last_modified=1700000000000 + i, kind="image")
            for i in range(count)]


@pytest.fixture
def make_files():
    """Factory for distinct FileRef lists."""
    return _files


@pytest.fixture
def scenario_state():
    """Bust sketch ($20), additional character, 2 props, basic style, 3 references."""
    return SelectionState(
        step=Step.DETAILS,
        selected_type_id="character",
        selected_sub_id="bust",
        selected_tier_index=0,
        selected_addons=OrderedDict([("addChar", True), ("itemProp", 2)]),
        files=_files(3),
    )
