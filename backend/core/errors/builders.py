"""Err builders, one per error the scheduler reports.

Each returns ``Err(AppError)`` so a check can ``return`` it directly.
"""
from .types import AppError, Err, ErrorCode, ErrorContext


def _err(code: ErrorCode, message: str, origin: str, **metadata) -> Err[AppError]:
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in metadata.items() if v is not None},
    ))


def validation_error(message: str, *, field: str | None = None, origin: str = "", **metadata) -> Err[AppError]:
    return _err(ErrorCode.E2000_VALIDATION_GENERIC, message, origin, field=field, **metadata)


def out_of_range(
    field: str,
    value: int | float,
    min_val: int | float | None = None,
    max_val: int | float | None = None,
    origin: str = "",
) -> Err[AppError]:
    bounds = " and ".join(
        f"{op} {bound}" for op, bound in ((">=", min_val), ("<=", max_val)) if bound is not None
    )
    return _err(
        ErrorCode.E2003_OUT_OF_RANGE,
        f"{field}={value} is out of range (expected {bounds})",
        origin,
        field=field, value=value, min=min_val, max=max_val,
    )


def constraint_violation(field: str, constraint: str, value: str | None = None, origin: str = "") -> Err[AppError]:
    return _err(
        ErrorCode.E2005_CONSTRAINT_VIOLATION,
        f"{field} violates {constraint}",
        origin,
        field=field, constraint=constraint, value=value,
    )


def duplicate_entry(entity: str, key: str, origin: str = "") -> Err[AppError]:
    return _err(ErrorCode.E2006_DUPLICATE_ENTRY, f"duplicate {entity} '{key}'", origin, entity=entity, key=key)


def unknown_reference(entity: str, key: str, origin: str = "") -> Err[AppError]:
    return _err(ErrorCode.E2007_UNKNOWN_REFERENCE, f"unknown {entity} '{key}'", origin, entity=entity, key=key)


def precondition_failed(condition: str, reason: str = "", origin: str = "") -> Err[AppError]:
    message = f"precondition failed: {condition}"
    if reason:
        message += f" ({reason})"
    return _err(ErrorCode.E5003_PRECONDITION_FAILED, message, origin, condition=condition, reason=reason or None)
