from typing import Any, Dict, Optional, List, Literal
from pydantic import BaseModel, Field, model_validator

from simcore.analytical import get_required_inputs
from simcore.simulation import KINDS, normalize_kind, resolve_servers


DistType = Literal["exponential", "uniform", "normal"]

class DistributionSpec(BaseModel):
    dist_type: DistType
    params: Dict[str, float]

# ---------- Analytical ----------
# request field name -> name used by get_required_inputs
_INPUT_FIELDS = {"lambda": "lambda_", "mu": "mu", "s": "s", "sigma": "sigma", "ca": "ca", "cs": "cs"}

class AnalyticalRequest(BaseModel):
    model: str = Field(
        ...,
        examples=["MM1", "MMS", "MG1", "MGS", "GG1", "GGS"]
    )

    lambda_: Optional[float] = None
    mu: Optional[float] = None
    s: Optional[int] = None
    sigma: Optional[float] = None
    ca: Optional[float] = None
    cs: Optional[float] = None

    @model_validator(mode="after")
    def check_model_requirements(self):
        # unknown models pass through; the calculator reports them
        missing = [name for name in get_required_inputs(self.model)
                   if getattr(self, _INPUT_FIELDS[name]) is None]
        if missing:
            raise ValueError(f"{self.model} requires: {', '.join(missing)}")
        return self


class AnalyticalResponse(BaseModel):
    model: str
    display_name: str
    rho: float
    stable: bool
    # None when the metric is infinite (unstable system)
    Lq: Optional[float]
    Wq: Optional[float]
    W: Optional[float]
    L: Optional[float]
    error: Optional[str] = None


class ModelInfo(BaseModel):
    tag: str
    display_name: str
    required_inputs: List[str]

# ---------- Simulation ----------
class SimulationRequest(BaseModel):
    model: str = Field(..., examples=list(KINDS))
    lambda_: float = Field(..., gt=0)
    mu: Optional[float] = Field(None, gt=0)
    servers: int = Field(1, ge=1)
    use_priority: bool = False
    service: Optional[DistributionSpec] = None
    seed: Optional[int] = None

    @model_validator(mode="after")
    def check_model_requirements(self):
        family, _ = normalize_kind(self.model)
        servers = resolve_servers(self.model, self.servers)

        # M/M/*
        if family == "M":
            if self.mu is None:
                raise ValueError("M/M models require mu")
            if self.service is not None:
                raise ValueError("M/M models take mu, not a service distribution")
            if self.lambda_ >= servers * self.mu:
                raise ValueError(f"System unstable: lambda_ must be less than {servers} x mu")
            return self

        # M/G/*
        if self.service is None:
            raise ValueError("M/G models require service distribution")
        p = self.service.params
        if self.service.dist_type == "uniform":
            a, b = p.get("min"), p.get("max")
            if a is None or b is None or a < 0 or b <= a:
                raise ValueError("uniform service requires 0 <= min < max")
        elif self.service.dist_type == "normal":
            if p.get("mean", 0) <= 0 or p.get("std", 0) <= 0:
                raise ValueError("normal service requires mean > 0 and std > 0")
        elif p.get("mean", 0) <= 0:
            raise ValueError("exponential service requires mean > 0")
        return self

class SimulationRow(BaseModel):
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
    server: Optional[str] = None

class ServiceChunk(BaseModel):
    label: str
    start: int
    end: int
    server: Optional[str] = None

class SimulationAverages(BaseModel):
    avg_turnaround: float
    avg_wait: float
    avg_response: float
    avg_inter_arrival: float
    avg_service: float
    server_utilization: float
    total_customers: int

class SimulationResponse(BaseModel):
    rows: List[SimulationRow]
    chunks: List[ServiceChunk]
    averages: SimulationAverages

# ---------- History ----------
class HistoryItem(BaseModel):
    id: str
    timestamp: float
    kind: str
    params: Dict[str, Any]

class HistoryDetail(HistoryItem):
    result: Dict[str, Any]
