"""Tests for application and loader exceptions."""

from __future__ import annotations

from taskboard_service.core.database import ConstraintViolationError, NotFoundError
from taskboard_service.core.dataloader import (
    BatchContractError,
    BatchFetchError,
    InvalidKeyError,
)
from taskboard_service.core.exceptions import (
    AppException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)


class TestAppExceptions:
    def test_defaults(self) -> None:
        exc = AppException(status_code=400, detail="Bad input")

        assert exc.type == "about:blank"
        assert exc.title == "Bad Request"
        assert exc.extra == {}
        assert str(exc) == "Bad input"

    def test_unknown_status_title(self) -> None:
        assert AppException(status_code=499, detail="closed").title == "Error"

    def test_subclass_status_codes(self) -> None:
        assert NotFoundException("x").status_code == 404
        assert ValidationException("x").status_code == 422
        assert UnauthorizedException("x").status_code == 401
        assert ForbiddenException("x").status_code == 403
        assert ConflictException("x").status_code == 409

    def test_subclass_titles(self) -> None:
        assert ForbiddenException("x").title == "Forbidden"
        assert ValidationException("x").title == "Validation Error"
        assert NotFoundException("x").type == "not-found"

    def test_conflict_carries_extra(self) -> None:
        exc = ConflictException("taken", type="user-exists", extra={"field": "email"})

        assert exc.type == "user-exists"
        assert exc.extra == {"field": "email"}


class TestRepositoryErrors:
    def test_constraint_violation_details(self) -> None:
        exc = ConstraintViolationError("User", "UNIQUE constraint failed: users.email")

        assert str(exc).startswith("User violates a database constraint")
        assert exc.details["reason"].endswith("users.email")

    def test_not_found_message(self) -> None:
        exc = NotFoundError("Project", {"id": 42})

        assert exc.message == "Project not found with id=42"
        assert exc.details == {"model": "Project", "id": 42}
        assert "Project" in repr(exc)


class TestLoaderErrors:
    def test_contract_error_message(self) -> None:
        exc = BatchContractError(3, 2, loader="users")

        assert "expected 3, got 2" in str(exc)
        assert exc.details["loader"] == "users"

    def test_contract_error_for_non_sequence(self) -> None:
        exc = BatchContractError(1, None)

        assert exc.received is None
        assert "sequence" in exc.message

    def test_fetch_error_chains_cause(self) -> None:
        cause = TimeoutError("slow")
        exc = BatchFetchError(cause, [1, 2], loader="projects")

        assert exc.cause is cause
        assert exc.__cause__ is cause
        assert exc.details == {"keys": 2, "cause": "TimeoutError", "loader": "projects"}

    def test_invalid_key_error_is_type_error(self) -> None:
        exc = InvalidKeyError(None, "key must not be None")

        assert isinstance(exc, TypeError)
        assert exc.key is None
