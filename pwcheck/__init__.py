"""Password strength and breach-similarity evaluation engine."""

from pwcheck.dictionary import DictionaryLoader, DictionaryStore
from pwcheck.errors import (
    EmptyInput,
    InvalidType,
    PasswordEvaluationError,
    SecurityInvariantViolation,
    TooLong,
)
from pwcheck.evaluator import EvaluationResult, PasswordEvaluator

__version__ = "1.1.0"

__all__ = [
    "DictionaryLoader",
    "DictionaryStore",
    "EmptyInput",
    "EvaluationResult",
    "InvalidType",
    "PasswordEvaluationError",
    "PasswordEvaluator",
    "SecurityInvariantViolation",
    "TooLong",
]
