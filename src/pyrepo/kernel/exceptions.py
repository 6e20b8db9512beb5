"""Unified exception hierarchy for pyrepo.

All library exceptions inherit from PyRepoException, so callers can catch
one base class for everything raised by repositories and criteria.

Categories:
- RepositoryException: Repository misconfiguration and infrastructure misuse
- ModelNotFoundException: Retrieval found no matching record
- CriteriaException: Criteria keys, parameters and named scopes
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class PyRepoException(Exception):
    """Base exception for all pyrepo errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "SCOPE_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Repository Exceptions
# =============================================================================


class RepositoryException(PyRepoException):
    """A repository is misconfigured or used without its collaborators."""


class ModelNotFoundException(PyRepoException):
    """No record matched a ``*_or_fail`` retrieval."""

    def __init__(self, model: type, id: object | None = None) -> None:
        message = f"No query results for model [{model.__name__}]"
        if id is not None:
            message = f"{message} {id}"
        super().__init__(message, code="MODEL_NOT_FOUND", context={"model": model.__name__, "id": id})
        self.model = model
        self.id = id


class InvalidCallbackError(RepositoryException):
    """A custom query callback did not return a SELECT statement."""


# =============================================================================
# Criteria Exceptions
# =============================================================================


class CriteriaException(PyRepoException):
    """Errors raised while building or applying criteria."""


class InvalidScopeError(CriteriaException):
    """A Scopes criterion references a scope the entity does not define."""

    def __init__(self, scope: str, model: type) -> None:
        super().__init__(
            f"Scope '{scope}' is not supported by {model.__name__}",
            code="SCOPE_001",
            context={"scope": scope, "model": model.__name__},
        )
        self.scope = scope


class InvalidCriteriaKeyError(CriteriaException):
    """A criteria key is not a non-empty string."""

    def __init__(self, key: object) -> None:
        super().__init__(
            f"Criteria key must be a non-empty string, got {key!r}",
            code="CRITERIA_001",
            context={"key": key},
        )
        self.key = key


class InvalidCriteriaError(CriteriaException):
    """A built-in criterion was constructed or applied with bad parameters."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="CRITERIA_002", context=context)
