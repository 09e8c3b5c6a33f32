# tests/conftest.py
import pytest

from multiflow.domain.assumptions import EvaluationAssumptions
from multiflow.domain.grading import GradeProfile

from fixtures.deals import (
    cash_flow_beast,
    itemized_triplex,
    missing_financing,
    textbook_triplex,
)


@pytest.fixture
def assumptions():
    return EvaluationAssumptions()


@pytest.fixture
def balanced_profile():
    return GradeProfile.default_profile()


@pytest.fixture
def triplex():
    return textbook_triplex()


@pytest.fixture
def itemized():
    return itemized_triplex()


@pytest.fixture
def beast():
    return cash_flow_beast()


@pytest.fixture
def unfinanced():
    return missing_financing()
