"""
Configuration for property-based tests.

Property-based tests use Hypothesis to generate random surveys and verify
invariants of the estimators: permutation invariance, additivity of totals
and reduction to raw proportions under a census.
"""

from pathlib import Path

import pytest
from hypothesis import settings

settings.register_profile("rvcstats", max_examples=50, deadline=None)
settings.load_profile("rvcstats")


def pytest_collection_modifyitems(items):
    """Mark tests in this directory as property tests."""
    property_dir = Path(__file__).parent
    for item in items:
        if property_dir in item.path.parents:
            item.add_marker(pytest.mark.property)
