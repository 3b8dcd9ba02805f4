from .simulation_step import QueryKind, SimulationStep, StepType
from .query_simulator import QuerySimulator, simulate_select_query

__all__ = [
    "QueryKind",
    "SimulationStep",
    "StepType",
    "QuerySimulator",
    "simulate_select_query",
]
