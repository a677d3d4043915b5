import logging
import math
from typing import Callable, Dict, List, Optional

from .models import QueuingInput, QueuingResult

logger = logging.getLogger(__name__)

INF = float("inf")


# ---------- Result helpers ----------
def _invalid(message: str) -> QueuingResult:
    return QueuingResult(rho=0.0, stable=False, Lq=0.0, Wq=0.0, W=0.0, L=0.0, error=message)


def _unstable(rho: float) -> QueuingResult:
    # valid input, just no steady state: no error string
    return QueuingResult(rho=rho, stable=False, Lq=INF, Wq=INF, W=INF, L=INF)


def _from_lq(lambda_: float, mu: float, rho: float, Lq: float) -> QueuingResult:
    Wq = Lq / lambda_ if lambda_ > 0 else 0.0
    W = Wq + 1.0 / mu
    L = lambda_ * W
    return QueuingResult(rho=rho, stable=True, Lq=Lq, Wq=Wq, W=W, L=L)


def _from_wq(lambda_: float, mu: float, rho: float, Wq: float) -> QueuingResult:
    Lq = lambda_ * Wq
    W = Wq + 1.0 / mu
    L = lambda_ * W
    return QueuingResult(rho=rho, stable=True, Lq=Lq, Wq=Wq, W=W, L=L)


def _bad_servers(s) -> bool:
    return s <= 0 or int(s) != s


# ---------- Defaults ----------
# When the caller leaves them out, the general models fall back to an
# exponential-equivalent service process: sigma = 1/mu, so cs = sigma*mu = 1,
# and Poisson arrivals, ca = 1.
def default_sigma(mu: float) -> float:
    return 1.0 / mu

def default_cs(sigma: float, mu: float) -> float:
    return sigma * mu

DEFAULT_CA = 1.0
DEFAULT_SERVERS = 1


# ---------- Erlang C ----------
def erlang_c(lambda_: float, mu: float, s: int) -> float:
    """
    Probability that an arrival has to wait in M/M/s:

      Pw = [a^s/s! / (1-rho)] / [ sum_{k<s} a^k/k! + a^s/s! / (1-rho) ]

    with a = lambda/mu and rho = a/s. Returns 1 when rho >= 1.
    """
    rho = lambda_ / (s * mu)
    if rho >= 1:
        return 1.0

    a = lambda_ / mu
    term = 1.0  # a^k / k!
    total = 0.0
    for k in range(s):
        if k > 0:
            term *= a / k
        total += term
    tail = (term * a / s) / (1.0 - rho)  # a^s/s! over (1-rho)
    return tail / (total + tail)


# ---------- M/M/1 ----------
def calculate_mm1(inp: QueuingInput) -> QueuingResult:
    lambda_, mu = inp.lambda_, inp.mu
    if mu <= 0 or lambda_ < 0:
        return _invalid("Invalid lambda or mu values")

    rho = lambda_ / mu
    if rho >= 1:
        return _unstable(rho)

    Lq = (rho * rho) / (1.0 - rho)
    return _from_lq(lambda_, mu, rho, Lq)


# ---------- M/M/S ----------
def calculate_mms(inp: QueuingInput) -> QueuingResult:
    lambda_, mu = inp.lambda_, inp.mu
    s = DEFAULT_SERVERS if inp.s is None else inp.s
    if mu <= 0 or lambda_ < 0 or _bad_servers(s):
        return _invalid("Invalid input values")
    s = int(s)

    rho = lambda_ / (s * mu)
    if rho >= 1:
        return _unstable(rho)

    Pw = erlang_c(lambda_, mu, s)
    Wq = Pw / (s * mu - lambda_)
    return _from_wq(lambda_, mu, rho, Wq)


# ---------- M/G/1 (Pollaczek–Khinchine) ----------
def calculate_mg1(inp: QueuingInput) -> QueuingResult:
    lambda_, mu = inp.lambda_, inp.mu
    if mu <= 0 or lambda_ < 0 or (inp.sigma is not None and inp.sigma < 0):
        return _invalid("Invalid input values")
    sigma = default_sigma(mu) if inp.sigma is None else inp.sigma

    rho = lambda_ / mu
    if rho >= 1:
        return _unstable(rho)

    Lq = (lambda_ * lambda_ * sigma * sigma + rho * rho) / (2.0 * (1.0 - rho))
    return _from_lq(lambda_, mu, rho, Lq)


# ---------- M/G/S (M/M/S scaled by (1 + Cs^2)/2) ----------
def calculate_mgs(inp: QueuingInput) -> QueuingResult:
    lambda_, mu = inp.lambda_, inp.mu
    s = DEFAULT_SERVERS if inp.s is None else inp.s
    if mu <= 0 or lambda_ < 0 or _bad_servers(s) or (inp.sigma is not None and inp.sigma < 0):
        return _invalid("Invalid input values")
    sigma = default_sigma(mu) if inp.sigma is None else inp.sigma

    rho = lambda_ / (s * mu)
    if rho >= 1:
        return _unstable(rho)

    base = calculate_mms(QueuingInput(lambda_=lambda_, mu=mu, s=s))
    if not base.stable:
        return _unstable(rho)

    Cs2 = (sigma * mu) ** 2
    Wq = base.Wq * (1.0 + Cs2) / 2.0
    return _from_wq(lambda_, mu, rho, Wq)


def _general_params(inp: QueuingInput):
    """(sigma, ca, cs) with defaults resolved, or None if any is negative."""
    if any(v is not None and v < 0 for v in (inp.sigma, inp.ca, inp.cs)):
        return None
    sigma = default_sigma(inp.mu) if inp.sigma is None else inp.sigma
    ca = DEFAULT_CA if inp.ca is None else inp.ca
    cs = default_cs(sigma, inp.mu) if inp.cs is None else inp.cs
    return sigma, ca, cs


# ---------- G/G/1 (Kingman) ----------
def calculate_gg1(inp: QueuingInput) -> QueuingResult:
    """
    Lq = rho^2 (1 + Ca^2)(Cs^2 + rho^2 Ca^2) / [2 (1 - rho)(1 + rho^2 Cs^2)]
    """
    lambda_, mu = inp.lambda_, inp.mu
    if mu <= 0 or lambda_ < 0:
        return _invalid("Invalid input values")
    params = _general_params(inp)
    if params is None:
        return _invalid("Invalid input values")
    _, ca, cs = params

    rho = lambda_ / mu
    if rho >= 1:
        return _unstable(rho)

    Ca2 = ca * ca
    Cs2 = cs * cs
    numerator = rho * rho * (1.0 + Ca2) * (Cs2 + rho * rho * Ca2)
    denominator = 2.0 * (1.0 - rho) * (1.0 + rho * rho * Cs2)
    return _from_lq(lambda_, mu, rho, numerator / denominator)


# ---------- G/G/S (M/M/S scaled by (Ca^2 + Cs^2)/2) ----------
def calculate_ggs(inp: QueuingInput) -> QueuingResult:
    lambda_, mu = inp.lambda_, inp.mu
    s = DEFAULT_SERVERS if inp.s is None else inp.s
    if mu <= 0 or lambda_ < 0 or _bad_servers(s):
        return _invalid("Invalid input values")
    params = _general_params(inp)
    if params is None:
        return _invalid("Invalid input values")
    _, ca, cs = params

    rho = lambda_ / (s * mu)
    if rho >= 1:
        return _unstable(rho)

    base = calculate_mms(QueuingInput(lambda_=lambda_, mu=mu, s=s))
    if not base.stable:
        return _unstable(rho)

    Wq = base.Wq * (ca * ca + cs * cs) / 2.0
    return _from_wq(lambda_, mu, rho, Wq)


# ---------- Dispatcher ----------
CALCULATORS: Dict[str, Callable[[QueuingInput], QueuingResult]] = {
    "MM1": calculate_mm1,
    "MMS": calculate_mms,
    "MG1": calculate_mg1,
    "MGS": calculate_mgs,
    "GG1": calculate_gg1,
    "GGS": calculate_ggs,
}

REQUIRED_INPUTS: Dict[str, List[str]] = {
    "MM1": ["lambda", "mu"],
    "MMS": ["lambda", "mu", "s"],
    "MG1": ["lambda", "mu", "sigma"],
    "MGS": ["lambda", "mu", "s", "sigma"],
    "GG1": ["lambda", "mu", "ca", "cs"],
    "GGS": ["lambda", "mu", "s", "ca", "cs"],
}

DISPLAY_NAMES: Dict[str, str] = {
    "MM1": "M/M/1",
    "MMS": "M/M/S",
    "MG1": "M/G/1",
    "MGS": "M/G/S",
    "GG1": "G/G/1",
    "GGS": "G/G/S",
}


def normalize_model(model: str) -> Optional[str]:
    """'M/M/1', 'mm1', 'G/G/c', 'GG/S' ... -> canonical tag, or None."""
    if not isinstance(model, str):
        return None
    m = model.strip().upper().replace(" ", "").replace("/", "")
    if m.endswith("C"):
        m = m[:-1] + "S"
    return m if m in CALCULATORS else None


def calculate_queuing_metrics(model: str, inp: QueuingInput) -> QueuingResult:
    tag = normalize_model(model)
    if tag is None:
        logger.warning("Unknown queuing model requested: %r", model)
        return _invalid("Unknown model")

    result = CALCULATORS[tag](inp)
    if result.error:
        logger.info("%s rejected input %s: %s", tag, inp, result.error)
    return result


def get_required_inputs(model: str) -> List[str]:
    tag = normalize_model(model)
    return list(REQUIRED_INPUTS[tag]) if tag else []


def get_model_display_name(model: str) -> str:
    tag = normalize_model(model)
    return DISPLAY_NAMES[tag] if tag else model
