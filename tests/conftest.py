"""
Shared pytest fixtures for dispatchsim tests.
"""

import logging
from pathlib import Path

import pytest

from dispatchsim.components.dispatch.engine import DispatchEngine
from dispatchsim.core.simulation import Simulation


@pytest.fixture(scope="session")
def test_output_root() -> Path:
    """
    Returns the root test_output directory. Created once per test session.
    Files here persist after tests complete for easy access.
    """
    output_dir = Path(__file__).parent.parent / "test_output"
    output_dir.mkdir(exist_ok=True)
    return output_dir


@pytest.fixture
def test_output_dir(request, test_output_root) -> Path:
    """
    Returns a directory for the current test to write output files.
    Directory structure: test_output/<module_name>/<test_name>/
    """
    module_name = request.module.__name__.split(".")[-1]
    test_name = request.node.name

    test_dir = test_output_root / module_name / test_name
    test_dir.mkdir(parents=True, exist_ok=True)
    return test_dir


@pytest.fixture
def engine() -> DispatchEngine:
    """A DispatchEngine with a 10s processing time."""
    return DispatchEngine("dispatch", processing_time=10.0)


@pytest.fixture
def sim(engine) -> Simulation:
    """A Simulation with `engine` attached, clock at t=0."""
    return Simulation(entities=[engine])


@pytest.fixture(autouse=True)
def reset_dispatchsim_logging():
    """Reset the package logger to its library default around each test."""
    logger = logging.getLogger("dispatchsim")

    def _reset():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            if not isinstance(handler, logging.NullHandler):
                handler.close()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    _reset()
    yield
    _reset()
