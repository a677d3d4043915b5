import logging
import math
from dataclasses import asdict
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from simapi.schemas import (
    AnalyticalRequest, AnalyticalResponse,
    HistoryDetail, HistoryItem, ModelInfo,
    SimulationRequest, SimulationResponse
)

from simcore import config
from simcore.analytical import (
    DISPLAY_NAMES, calculate_queuing_metrics, get_model_display_name,
    get_required_inputs, normalize_model
)
from simcore.history import HistoryEntry, ResultHistory
from simcore.models import (
    DistributionSpec as CoreDistributionSpec, QueuingInput,
    SimulationRequest as CoreSimReq
)
from simcore.simulation import simulate

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("simapi")

app = FastAPI(title="Queue Simulator API", version="1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

simulation_history = ResultHistory()
analytical_history = ResultHistory()

HISTORIES = {"simulations": simulation_history, "analytical": analytical_history}


def _finite_or_none(x: float):
    return x if math.isfinite(x) else None

def _history(which: str) -> ResultHistory:
    if which not in HISTORIES:
        raise HTTPException(status_code=404, detail=f"Unknown history: {which}")
    return HISTORIES[which]

def _item(entry: HistoryEntry) -> HistoryItem:
    return HistoryItem(id=entry.id, timestamp=entry.timestamp, kind=entry.kind, params=entry.params)


@app.get("/health")
def health():
    return {"status": "ok"}

# ---------- Analytical ----------
@app.get("/models", response_model=List[ModelInfo])
def list_models():
    return [
        ModelInfo(tag=tag, display_name=name, required_inputs=get_required_inputs(tag))
        for tag, name in DISPLAY_NAMES.items()
    ]

@app.get("/models/{tag}", response_model=ModelInfo)
def model_info(tag: str):
    canonical = normalize_model(tag)
    if canonical is None:
        raise HTTPException(status_code=404, detail="Unknown model")
    return ModelInfo(
        tag=canonical,
        display_name=get_model_display_name(canonical),
        required_inputs=get_required_inputs(canonical),
    )

@app.post("/analytical", response_model=AnalyticalResponse)
def analytical(req: AnalyticalRequest):
    inp = QueuingInput(
        lambda_=req.lambda_, mu=req.mu, s=req.s,
        sigma=req.sigma, ca=req.ca, cs=req.cs
    )
    res = calculate_queuing_metrics(req.model, inp)
    if res.error:
        logger.info("analytical %s returned error: %s", req.model, res.error)

    response = AnalyticalResponse(
        model=normalize_model(req.model) or req.model,
        display_name=get_model_display_name(req.model),
        rho=res.rho,
        stable=res.stable,
        Lq=_finite_or_none(res.Lq),
        Wq=_finite_or_none(res.Wq),
        W=_finite_or_none(res.W),
        L=_finite_or_none(res.L),
        error=res.error,
    )
    if not res.error:
        analytical_history.add(response.model, asdict(inp), response.model_dump())
    return response

# ---------- Simulation ----------
@app.post("/simulate", response_model=SimulationResponse)
def simulate_endpoint(req: SimulationRequest):
    core_req = CoreSimReq(
        model=req.model,
        lambda_=req.lambda_,
        mu=req.mu,
        service=CoreDistributionSpec(dist_type=req.service.dist_type, params=req.service.params)
        if req.service else None,
        servers=req.servers,
        use_priority=req.use_priority,
        seed=req.seed if req.seed is not None else config.DEFAULT_SEED
    )
    try:
        res = simulate(core_req)
    except ValueError as exc:
        logger.warning("simulation rejected: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc))

    # convert dataclasses -> dicts for pydantic response
    response = SimulationResponse(
        rows=[r.__dict__ for r in res.rows],
        chunks=[c.__dict__ for c in res.chunks],
        averages=res.averages.__dict__
    )
    simulation_history.add(req.model, req.model_dump(), response.model_dump())
    return response

# ---------- History ----------
@app.get("/history/{which}", response_model=List[HistoryItem])
def list_history(which: str):
    return [_item(e) for e in _history(which).entries()]

@app.get("/history/{which}/{entry_id}", response_model=HistoryDetail)
def get_history_entry(which: str, entry_id: str):
    entry = _history(which).get(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="History entry not found")
    return HistoryDetail(id=entry.id, timestamp=entry.timestamp, kind=entry.kind,
                         params=entry.params, result=entry.result)

@app.delete("/history/{which}/{entry_id}")
def delete_history_entry(which: str, entry_id: str):
    if not _history(which).delete(entry_id):
        raise HTTPException(status_code=404, detail="History entry not found")
    return {"deleted": entry_id}

@app.delete("/history/{which}")
def clear_history(which: str):
    _history(which).clear()
    return {"cleared": which}
