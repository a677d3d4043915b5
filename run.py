# run.py

from simcore.models import SimulationRequest, DistributionSpec, QueuingInput
from simcore.simulation import simulate
from simcore.analytical import calculate_queuing_metrics, get_model_display_name, get_required_inputs

# =====================================================
# 1️⃣ Simulation
# =====================================================
req = SimulationRequest(
    model="M/M/1",
    lambda_=3.0,
    mu=5.0,
    use_priority=True,
    seed=42
)

res = simulate(req)

print("=== Simulation M/M/1 with priority (first 5 customers) ===")
for r in res.rows[:5]:
    print(r)

print("Chunks:", res.chunks[:5])
print("Averages:", res.averages)

req = SimulationRequest(
    model="M/G/S",
    lambda_=2.0,
    service=DistributionSpec(
        dist_type="normal",
        params={"mean": 3.0, "std": 1.0}
    ),
    servers=2,
    use_priority=True,
    seed=7
)

res = simulate(req)

print("\n=== Simulation M/G/2 with priority (first 5 customers) ===")
for r in res.rows[:5]:
    print(r)

print("Utilization %:", res.averages.server_utilization)

# =====================================================
# 2️⃣ Analytical
# =====================================================
for model, inp in [
    ("MM1", QueuingInput(lambda_=3.0, mu=5.0)),
    ("MMS", QueuingInput(lambda_=3.0, mu=2.0, s=2)),
    ("MG1", QueuingInput(lambda_=0.6, mu=1.0, sigma=0.5)),
    ("MGS", QueuingInput(lambda_=1.6, mu=1.0, s=2, sigma=0.7)),
    ("GG1", QueuingInput(lambda_=0.5, mu=1.0, ca=0.8, cs=0.2)),
    ("GGS", QueuingInput(lambda_=1.0, mu=1.0, s=2, ca=1.2, cs=0.5)),
    ("MM1", QueuingInput(lambda_=10.0, mu=5.0)),
]:
    print(f"\n=== Analytical {get_model_display_name(model)} {get_required_inputs(model)} ===")
    print(calculate_queuing_metrics(model, inp))
