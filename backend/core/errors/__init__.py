"""Result-based error handling.

Engine checks return ``Ok``/``Err``; routes turn an ``Err`` into an HTTP
error with ``raise_result``.

Usage:
    from core.errors import Ok, Result, AppError, duplicate_entry

    def check_unique(lemmas: list[str]) -> Result[None, AppError]:
        seen = set()
        for lemma in lemmas:
            if lemma in seen:
                return duplicate_entry("lemma", lemma, origin="selection")
            seen.add(lemma)
        return Ok(None)
"""
from .types import AppError, Err, ErrorCode, ErrorContext, Ok, Result
from .builders import (
    constraint_violation,
    duplicate_entry,
    out_of_range,
    precondition_failed,
    unknown_reference,
    validation_error,
)
from .handlers import AppErrorException, error_response, raise_result, register_error_handlers

__all__ = [
    "AppError",
    "Err",
    "ErrorCode",
    "ErrorContext",
    "Ok",
    "Result",
    "constraint_violation",
    "duplicate_entry",
    "out_of_range",
    "precondition_failed",
    "unknown_reference",
    "validation_error",
    "AppErrorException",
    "error_response",
    "raise_result",
    "register_error_handlers",
]
