import bisect
import logging
import math
import random
from typing import List

from .models import ArrivalRecord, DistributionSpec, PoissonTable
from .validators import require_params

logger = logging.getLogger(__name__)

CP_THRESHOLD = 0.99999
MAX_TERMS = 500
PRIORITY_CLASSES = (1, 2, 3)


def _round5(x: float) -> float:
    # half-up, so 0.123455 -> 0.12346 (round() would go to even)
    return math.floor(x * 100000 + 0.5) / 100000


# ---------- Arrival process ----------
def build_poisson_table(lambda_: float) -> PoissonTable:
    """
    Cumulative Poisson(lambda) table built from P(0) = e^-lambda and
    P(k) = P(k-1) * lambda / k, stopping once the cumulative probability
    reaches CP_THRESHOLD or MAX_TERMS terms were added.
    The last cumulative entry is pinned to exactly 1.0.
    """
    p = math.exp(-lambda_)
    cum = 0.0
    k = 0
    cp: List[float] = []
    ks: List[int] = []

    while True:
        cum += p
        cp.append(_round5(cum))
        ks.append(k)
        if cum >= CP_THRESHOLD or k >= MAX_TERMS:
            break
        k += 1
        p = p * (lambda_ / k)

    cp[-1] = 1.0
    cp_lookup = [0.0] + cp[:-1]
    logger.debug("Poisson table for lambda=%s has %d rows", lambda_, len(cp))
    return PoissonTable(cp=cp, cp_lookup=cp_lookup, no_between_arrivals=ks)


def lookup_interval(table: PoissonTable, r: float) -> int:
    """First i with cp_lookup[i] <= r <= cp[i]; the last row if none matches."""
    i = bisect.bisect_left(table.cp, r)
    if i >= len(table.cp):
        return len(table.cp) - 1
    return i


def generate_arrivals(lambda_: float, rng: random.Random) -> List[ArrivalRecord]:
    """
    One customer per table row. The first customer arrives at t=0; every
    other gap is an inverse-CDF draw against the table.
    """
    table = build_poisson_table(lambda_)
    records: List[ArrivalRecord] = []
    arrival_time = 0

    for i in range(len(table.cp)):
        gap = 0 if i == 0 else lookup_interval(table, rng.random())
        arrival_time += gap
        records.append(ArrivalRecord(
            index=i + 1,
            cp=table.cp[i],
            cp_lookup=table.cp_lookup[i],
            no_between_arrivals=table.no_between_arrivals[i],
            inter_arrival=gap,
            arrival_time=arrival_time,
        ))

    return records


# ---------- Service times ----------
def sample_exponential_service(mu: float, rng: random.Random) -> int:
    # 1 - U keeps the argument of log in (0, 1]
    u = 1.0 - rng.random()
    return max(1, math.ceil(-mu * math.log(u)))

def sample_uniform_service(a: float, b: float, rng: random.Random) -> int:
    return max(1, math.ceil(a + (b - a) * rng.random()))

def sample_normal_service(mean: float, std: float, rng: random.Random) -> int:
    # Box-Muller, one variate per pair of draws
    u1 = rng.random()
    u2 = rng.random()
    if u1 == 0:
        u1 = 0.0001
    z = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
    return max(1, math.ceil(mean + std * z))


def generate_service_times(spec: DistributionSpec, count: int, rng: random.Random) -> List[int]:
    dist_type = spec.dist_type.strip().lower()
    p = spec.params or {}

    if dist_type == "exponential":
        require_params(dist_type, p, ["mean"])
        return [sample_exponential_service(p["mean"], rng) for _ in range(count)]
    if dist_type == "uniform":
        require_params(dist_type, p, ["min", "max"])
        return [sample_uniform_service(p["min"], p["max"], rng) for _ in range(count)]
    if dist_type == "normal":
        require_params(dist_type, p, ["mean", "std"])
        return [sample_normal_service(p["mean"], p["std"], rng) for _ in range(count)]

    raise ValueError(f"Unknown dist_type: {spec.dist_type}")


# ---------- Priorities ----------
def generate_priorities(count: int, rng: random.Random) -> List[int]:
    return [rng.choice(PRIORITY_CLASSES) for _ in range(count)]
