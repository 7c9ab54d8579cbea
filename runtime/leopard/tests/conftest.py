"""
Pytest configuration and fixtures for Leopard tests.
"""

import os
import sys

import pytest

# Add grandparent directory to path for imports (to find leopard package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from leopard.environment import Environment
from leopard.evaluator import evaluate
from leopard.parser import parse
from leopard.runtime import LeopardRuntime


@pytest.fixture
def env():
    """Fresh top-level environment."""
    return Environment()


@pytest.fixture
def runtime():
    return LeopardRuntime()


@pytest.fixture
def run(env):
    """
    Parse and evaluate source against the test's environment.

    Fails the test if the source does not parse cleanly.
    """
    def _run(source):
        program, errors = parse(source)
        assert errors == [], f"parser errors for {source!r}: {errors}"
        return evaluate(program, env)
    return _run
