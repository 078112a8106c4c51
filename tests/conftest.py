"""Pytest configuration, Hypothesis settings and shared fixtures"""

import pytest
from hypothesis import settings, Verbosity

from credmode.interfaces.capabilities import NamespacedName
from tests.fakes import FakeCluster, FakeProvider, make_secret

# Configure Hypothesis for property-based testing
settings.register_profile("default", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=10, verbosity=Verbosity.verbose)

# Load default profile
settings.load_profile("default")


@pytest.fixture
def secret_ref():
    return NamespacedName("kube-system", "aws-creds")


@pytest.fixture
def cluster():
    """Fake cluster holding a well-formed credential secret"""
    fake = FakeCluster()
    fake.add(make_secret())
    return fake


@pytest.fixture
def provider():
    return FakeProvider()
