import logging
import random
import re
from typing import Optional, Tuple, Union

from .distributions import generate_arrivals, generate_priorities, generate_service_times
from .metrics import build_rows, compute_averages, multi_server_utilization, single_server_utilization
from .models import Customer, DistributionSpec, SimulationRequest, SimulationResult
from .scheduler import schedule_multi_server, schedule_single_server
from .validators import require_int_at_least

logger = logging.getLogger(__name__)

KINDS = ("M/M/1", "M/M/S", "M/G/1", "M/G/S")

_KIND_RE = re.compile(r"^M/?([MG])/?(S|C|[1-9]\d*)$")


# ---------- Kinds ----------
def _parse_kind(kind: str) -> Tuple[str, Optional[int]]:
    m = _KIND_RE.match(kind.strip().upper().replace(" ", ""))
    if not m:
        raise ValueError(f"Unknown simulation kind: {kind}")
    service, servers = m.groups()
    return service, None if servers in ("S", "C") else int(servers)


def normalize_kind(kind: str) -> Tuple[str, bool]:
    """
    "m/m/1", "MM1", "M/G/c", "M/M/3" ... -> ("M" or "G", multi_server).
    """
    service, fixed = _parse_kind(kind)
    return service, fixed is None or fixed > 1


def resolve_servers(kind: str, servers: int = 1) -> int:
    """
    Server count a kind runs with: `servers` for the S/C kinds, the digit
    otherwise. Single-server kinds ignore `servers`; for "M/M/3" style kinds
    an explicit `servers` other than 1 must agree with the digit.
    """
    _, fixed = _parse_kind(kind)
    if fixed is None:
        require_int_at_least("servers", servers, 1)
        return servers
    if fixed > 1 and servers not in (1, fixed):
        raise ValueError(f"{kind} fixes {fixed} servers, got servers={servers}")
    return fixed


def _service_spec(family: str, service: Union[float, DistributionSpec]) -> DistributionSpec:
    if isinstance(service, DistributionSpec):
        if family == "M" and service.dist_type != "exponential":
            raise ValueError(f"M/M kinds take exponential service, got {service.dist_type}")
        return service
    if family == "G":
        raise ValueError("M/G kinds require a DistributionSpec for service times")
    if service is None:
        raise ValueError("M/M kinds require mu")
    return DistributionSpec(dist_type="exponential", params={"mean": float(service)})


# ---------- Run ----------
def run_simulation(kind: str,
                   lambda_: float,
                   service: Union[float, DistributionSpec],
                   servers: int = 1,
                   use_priority: bool = False,
                   rng: Optional[random.Random] = None) -> SimulationResult:
    """
    Run one simulation.

    kind: "M/M/1", "M/M/S", "M/G/1" or "M/G/S" (aliases accepted).
    service: mu (exponential multiplier) for M/M kinds, a uniform or
        normal DistributionSpec for M/G kinds.
    servers: used by the S/C kinds; "M/M/3" style kinds fix their own count.
    rng: source of uniform draws; a fresh unseeded Random when omitted.

    lambda_ > 0, a positive service parameter and a stable configuration are
    the caller's job. The loop still terminates on bad numbers (the customer
    count is fixed and every service time is at least 1), it just reports
    meaningless results.
    """
    family, multi = normalize_kind(kind)
    spec = _service_spec(family, service)
    servers = resolve_servers(kind, servers)
    if rng is None:
        rng = random.Random()

    arrivals = generate_arrivals(lambda_, rng)
    n = len(arrivals)
    service_times = generate_service_times(spec, n, rng)
    priorities = generate_priorities(n, rng)

    customers = [
        Customer(index=a.index, arrival_time=a.arrival_time, service_time=s, priority=p)
        for a, s, p in zip(arrivals, service_times, priorities)
    ]

    if multi:
        chunks = schedule_multi_server(customers, servers, use_priority)
    else:
        chunks = schedule_single_server(customers, use_priority)

    rows = build_rows(arrivals, customers)
    if multi:
        utilization = multi_server_utilization(rows, servers)
    else:
        utilization = single_server_utilization(rows)
    averages = compute_averages(rows, utilization)

    logger.info("%s run (servers=%s, priority=%s): %d customers, utilization %.2f%%",
                kind, servers, use_priority, n, utilization)
    return SimulationResult(rows=rows, chunks=chunks, averages=averages)


def simulate(req: SimulationRequest) -> SimulationResult:
    rng = random.Random(req.seed)
    family, _ = normalize_kind(req.model)
    service = req.mu if family == "M" else req.service
    return run_simulation(
        kind=req.model,
        lambda_=req.lambda_,
        service=service,
        servers=req.servers,
        use_priority=req.use_priority,
        rng=rng,
    )
