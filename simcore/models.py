from dataclasses import dataclass, field
from typing import Dict, List, Optional, Literal

DistType = Literal["exponential", "uniform", "normal"]


@dataclass
class DistributionSpec:
    dist_type: DistType
    params: Dict[str, float]  # e.g. {"min": 1, "max": 3} or {"mean": 4, "std": 1}


# ---------- Arrival process ----------
@dataclass(frozen=True)
class PoissonTable:
    cp: List[float]                   # cumulative probability, rounded to 5 dp
    cp_lookup: List[float]            # cp shifted right with a leading 0
    no_between_arrivals: List[int]    # k for each row of the table


@dataclass(frozen=True)
class ArrivalRecord:
    index: int
    cp: float
    cp_lookup: float
    no_between_arrivals: int
    inter_arrival: int
    arrival_time: int


# ---------- Scheduling ----------
@dataclass
class Customer:
    index: int            # 1-based observation number
    arrival_time: int
    service_time: int
    priority: int = 1     # lower value = served first
    remaining: int = field(init=False)
    service_start: Optional[int] = None
    service_end: Optional[int] = None
    server: Optional[str] = None

    def __post_init__(self):
        self.remaining = self.service_time

    @property
    def label(self) -> str:
        return f"C{self.index}"


@dataclass(frozen=True)
class ServiceChunk:
    label: str
    start: int
    end: int
    server: Optional[str] = None

    @property
    def duration(self) -> int:
        return self.end - self.start


# ---------- Simulation output ----------
@dataclass
class SimulationRow:
    observation: int
    cp: float
    cp_lookup: float
    no_between_arrivals: int
    inter_arrival: int
    arrival_time: int
    service_time: int
    priority: int
    service_start: int
    service_end: int
    turnaround_time: int
    wait_time: int
    response_time: int
    server: Optional[str] = None  # "S1", "S2" ... for multi-server runs


@dataclass
class SimulationAverages:
    avg_turnaround: float
    avg_wait: float
    avg_response: float
    avg_inter_arrival: float
    avg_service: float
    server_utilization: float  # percent, 0..100
    total_customers: int


@dataclass
class SimulationResult:
    rows: List[SimulationRow]
    chunks: List[ServiceChunk]
    averages: SimulationAverages


@dataclass
class SimulationRequest:
    model: str                          # e.g. "M/M/1", "M/G/S"
    lambda_: float
    mu: Optional[float] = None          # M/M kinds
    service: Optional[DistributionSpec] = None  # M/G kinds
    servers: int = 1
    use_priority: bool = False
    seed: Optional[int] = None


# ---------- Analytical ----------
@dataclass
class QueuingInput:
    lambda_: float
    mu: float
    s: Optional[int] = None
    sigma: Optional[float] = None
    ca: Optional[float] = None
    cs: Optional[float] = None


@dataclass
class QueuingResult:
    rho: float
    stable: bool
    Lq: float
    Wq: float
    W: float
    L: float
    error: Optional[str] = None
