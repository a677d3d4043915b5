from typing import List, Sequence

from .models import ArrivalRecord, Customer, SimulationAverages, SimulationRow


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


# ---------- Rows ----------
def build_rows(arrivals: Sequence[ArrivalRecord], customers: Sequence[Customer]) -> List[SimulationRow]:
    rows: List[SimulationRow] = []
    for rec, cust in zip(arrivals, customers):
        turnaround = cust.service_end - cust.arrival_time
        rows.append(SimulationRow(
            observation=rec.index,
            cp=rec.cp,
            cp_lookup=rec.cp_lookup,
            no_between_arrivals=rec.no_between_arrivals,
            inter_arrival=rec.inter_arrival,
            arrival_time=rec.arrival_time,
            service_time=cust.service_time,
            priority=cust.priority,
            service_start=cust.service_start,
            service_end=cust.service_end,
            turnaround_time=turnaround,
            wait_time=turnaround - cust.service_time,
            response_time=cust.service_start - cust.arrival_time,
            server=cust.server,
        ))
    return rows


# ---------- Utilization ----------
def single_server_utilization(rows: Sequence[SimulationRow]) -> float:
    """Busy time over the span from the first service start to the last end, in percent."""
    if not rows:
        return 0.0
    busy = sum(r.service_time for r in rows)
    span = max(r.service_end for r in rows) - min(r.service_start for r in rows)
    if span <= 0:
        return 0.0
    return min(busy / span * 100.0, 100.0)


def multi_server_utilization(rows: Sequence[SimulationRow], servers: int) -> float:
    """
    Time-unit histogram of busy servers between each row's service start
    and end, each unit counted at most `servers` times, over
    simulation_end * servers, in percent.
    """
    end = max((r.service_end for r in rows), default=0)
    if end <= 0:
        return 0.0

    timeline = [0] * (end + 1)
    for r in rows:
        for t in range(r.service_start, r.service_end):
            timeline[t] += 1

    busy = sum(min(n, servers) for n in timeline)
    return min(busy / (end * servers) * 100.0, 100.0)


# ---------- Averages ----------
def compute_averages(rows: Sequence[SimulationRow], utilization: float) -> SimulationAverages:
    return SimulationAverages(
        avg_turnaround=_mean([r.turnaround_time for r in rows]),
        avg_wait=_mean([r.wait_time for r in rows]),
        avg_response=_mean([r.response_time for r in rows]),
        avg_inter_arrival=_mean([r.inter_arrival for r in rows]),
        avg_service=_mean([r.service_time for r in rows]),
        server_utilization=utilization,
        total_customers=len(rows),
    )
