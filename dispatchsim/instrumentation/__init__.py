"""Instrumentation and measurement components."""

from dispatchsim.instrumentation.data import Data
from dispatchsim.instrumentation.probe import Probe
from dispatchsim.instrumentation.summary import EntitySummary, SimulationSummary

__all__ = [
    "Data",
    "EntitySummary",
    "Probe",
    "SimulationSummary",
]
