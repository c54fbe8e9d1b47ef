from __future__ import annotations


class ContractViolation(ValueError):
    """An out-of-range index reached the table or the hash composer."""


def check_range(what: str, value: int, upper: int) -> int:
    if not (0 <= value < upper):
        raise ContractViolation(f"invalid {what}: {value!r}")
    return value
