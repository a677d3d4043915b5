from .analytical import calculate_queuing_metrics, get_model_display_name, get_required_inputs
from .history import HistoryEntry, ResultHistory
from .models import (
    DistributionSpec,
    QueuingInput,
    QueuingResult,
    ServiceChunk,
    SimulationAverages,
    SimulationRequest,
    SimulationResult,
    SimulationRow,
)
from .simulation import run_simulation, simulate

__all__ = [
    "DistributionSpec",
    "HistoryEntry",
    "QueuingInput",
    "QueuingResult",
    "ResultHistory",
    "ServiceChunk",
    "SimulationAverages",
    "SimulationRequest",
    "SimulationResult",
    "SimulationRow",
    "calculate_queuing_metrics",
    "get_model_display_name",
    "get_required_inputs",
    "run_simulation",
    "simulate",
]
