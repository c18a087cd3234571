"""
pytest configuration and fixtures for NBT decoder tests.

Provides reusable fixtures for:
- Hand-built NBT documents
- Compressed copies of documents
- Hypothesis property-based testing configuration
"""

import gzip
import os
import sys
import zlib
from pathlib import Path

import pytest

# Add project paths
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from nbt_factory import document, entry, payload  # noqa: E402

# Hypothesis profiles, chosen with HYPOTHESIS_PROFILE
from hypothesis import settings, Verbosity, Phase

# Default profile
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
)

# Reproducible runs with failure blobs in the log
settings.register_profile(
    "ci",
    max_examples=500,
    deadline=None,
    derandomize=True,
    print_blob=True,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)

settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
)

# Prints every generated document
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)

settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "default"))


@pytest.fixture
def hello_world():
    """The classic test document: compound 'hello world' with name='Bananrama'."""
    return document('hello world',
                    entry('TAG_String', 'name', payload.string('Bananrama')))


@pytest.fixture
def gzipped():
    """Return a function that gzips a document."""
    return gzip.compress


@pytest.fixture
def zlibbed():
    """Return a function that zlib-compresses a document."""
    return zlib.compress


# Markers for test categorization
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests that run the command-line tool"
    )
