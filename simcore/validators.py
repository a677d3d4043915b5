from typing import Dict, Iterable


def require_int_at_least(name: str, value: int, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValueError(f"{name} must be an integer >= {minimum}")

def require_params(dist_type: str, params: Dict[str, float], keys: Iterable[str]) -> None:
    missing = [k for k in keys if params.get(k) is None]
    if missing:
        raise ValueError(f"{dist_type} service requires params: {', '.join(missing)}")
