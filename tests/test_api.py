"""HTTP-level checks for the FastAPI front end."""

import math

import pytest
from fastapi.testclient import TestClient

from simapi.main import analytical_history, app, simulation_history

client = TestClient(app)


@pytest.fixture(autouse=True)
def _empty_histories():
    simulation_history.clear()
    analytical_history.clear()
    yield


def test_health():
    assert client.get("/health").json() == {"status": "ok"}


def test_models_listing():
    body = client.get("/models").json()
    assert [m["tag"] for m in body] == ["MM1", "MMS", "MG1", "MGS", "GG1", "GGS"]
    assert body[1]["required_inputs"] == ["lambda", "mu", "s"]

    assert client.get("/models/ggs").json()["display_name"] == "G/G/S"
    assert client.get("/models/nope").status_code == 404


def test_analytical_mm1():
    resp = client.post("/analytical", json={"model": "MM1", "lambda_": 3.0, "mu": 5.0})
    assert resp.status_code == 200
    body = resp.json()
    assert body["stable"] is True
    assert body["display_name"] == "M/M/1"
    assert math.isclose(body["L"], 1.5)
    assert len(analytical_history) == 1


def test_analytical_unstable_serializes_null_metrics():
    body = client.post("/analytical", json={"model": "MM1", "lambda_": 10.0, "mu": 5.0}).json()
    assert body["stable"] is False
    assert body["error"] is None
    assert body["Lq"] is None and body["W"] is None
    assert math.isclose(body["rho"], 2.0)


def test_analytical_missing_required_input():
    resp = client.post("/analytical", json={"model": "MMS", "lambda_": 3.0, "mu": 5.0})
    assert resp.status_code == 422


def test_analytical_error_result_is_not_recorded():
    body = client.post("/analytical", json={"model": "MM1", "lambda_": 3.0, "mu": 0.0}).json()
    assert body["error"] == "Invalid lambda or mu values"
    body = client.post("/analytical", json={"model": "XYZ"}).json()
    assert body["error"] == "Unknown model"
    assert len(analytical_history) == 0


def test_simulate_mm1():
    resp = client.post("/simulate", json={
        "model": "M/M/1", "lambda_": 3.0, "mu": 5.0, "use_priority": True, "seed": 7,
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["averages"]["total_customers"] == len(body["rows"])
    for row in body["rows"]:
        assert row["service_end"] >= row["service_start"] >= row["arrival_time"]
    assert len(simulation_history) == 1


def test_simulate_mgs():
    resp = client.post("/simulate", json={
        "model": "M/G/S", "lambda_": 2.0, "servers": 2, "seed": 3,
        "service": {"dist_type": "uniform", "params": {"min": 1, "max": 4}},
    })
    assert resp.status_code == 200
    assert {c["server"] for c in resp.json()["chunks"]} <= {"S1", "S2"}


@pytest.mark.parametrize("payload", [
    {"model": "M/M/1", "lambda_": 6.0, "mu": 5.0},
    {"model": "M/M/S", "lambda_": 11.0, "mu": 5.0, "servers": 2},
    {"model": "M/M/1", "lambda_": 3.0},
    {"model": "M/M/1", "lambda_": 0.0, "mu": 5.0},
    {"model": "M/G/1", "lambda_": 2.0},
    {"model": "M/G/1", "lambda_": 2.0,
     "service": {"dist_type": "uniform", "params": {"min": 4, "max": 1}}},
    {"model": "M/G/1", "lambda_": 2.0,
     "service": {"dist_type": "normal", "params": {"mean": 3, "std": 0}}},
    {"model": "G/G/1", "lambda_": 2.0, "mu": 5.0},
    {"model": "M/M/1", "lambda_": 3.0, "mu": 5.0,
     "service": {"dist_type": "uniform", "params": {"min": 1, "max": 1.5}}},
    {"model": "M/M/3", "lambda_": 3.0, "mu": 5.0, "servers": 2},
    {"model": "M/M/3", "lambda_": 16.0, "mu": 5.0},
])
def test_simulate_rejects_bad_requests(payload):
    assert client.post("/simulate", json=payload).status_code == 422
    assert len(simulation_history) == 0


def test_history_endpoints():
    client.post("/simulate", json={"model": "M/M/1", "lambda_": 2.0, "mu": 3.0, "seed": 1})
    client.post("/simulate", json={"model": "M/M/1", "lambda_": 1.0, "mu": 3.0, "seed": 2})

    items = client.get("/history/simulations").json()
    assert [i["params"]["lambda_"] for i in items] == [1.0, 2.0]

    detail = client.get(f"/history/simulations/{items[0]['id']}").json()
    assert "rows" in detail["result"]

    assert client.delete(f"/history/simulations/{items[0]['id']}").status_code == 200
    assert client.delete(f"/history/simulations/{items[0]['id']}").status_code == 404
    assert len(client.get("/history/simulations").json()) == 1

    assert client.delete("/history/simulations").status_code == 200
    assert client.get("/history/simulations").json() == []
    assert client.get("/history/bogus").status_code == 404


def test_simulate_digit_kind_uses_its_server_count():
    # 3 servers x mu 5 keeps lambda 12 stable; servers defaults to 1
    resp = client.post("/simulate", json={"model": "M/M/3", "lambda_": 12.0, "mu": 5.0, "seed": 2})
    assert resp.status_code == 200
    assert {c["server"] for c in resp.json()["chunks"]} <= {"S1", "S2", "S3"}
