def require_non_negative(v: int, name: str = "value") -> None:
    if v < 0:
        raise ValueError(f"{name} must be >= 0")


def require_ordered(low: int, high: int, low_name: str = "min", high_name: str = "max") -> None:
    if high < low:
        raise ValueError(f"{high_name} must be >= {low_name} ({high} < {low})")
