"""Error Hierarchy - tests for codes, HTTP statuses and envelopes.

Tests cover:
    - Each taxonomy entry has a distinct stable code
    - HTTP status mapping per error
    - to_response() REST envelope
"""

from uuid import uuid4

from workboard.core.errors import (
    ConflictError, DatabaseError, DependencyNotSatisfiedError, ErrorContext,
    ForbiddenError, InvalidDependencySetError, InvalidInputError,
    InvalidTeamMemberError, NotAuthenticatedError, ResourceNotFoundError,
    SelfDependencyError, WorkboardError,
)


def _taxonomy() -> list[WorkboardError]:
    return [
        ResourceNotFoundError("Task", uuid4()),
        ForbiddenError("no", "task:read"),
        InvalidInputError("bad", "title"),
        InvalidDependencySetError(["x"]),
        SelfDependencyError(uuid4()),
        DependencyNotSatisfiedError(["y"]),
        InvalidTeamMemberError(["z"]),
        ConflictError("dup"),
    ]


def test_taxonomy_codes_are_distinct():
    codes = [e.code for e in _taxonomy()]
    assert len(set(codes)) == len(codes)


def test_http_statuses():
    statuses = {type(e).__name__: e.http_status for e in _taxonomy()}
    assert statuses == {
        "ResourceNotFoundError": 404,
        "ForbiddenError": 403,
        "InvalidInputError": 400,
        "InvalidDependencySetError": 400,
        "SelfDependencyError": 400,
        "DependencyNotSatisfiedError": 409,
        "InvalidTeamMemberError": 400,
        "ConflictError": 409,
    }
    assert NotAuthenticatedError().http_status == 401
    assert DatabaseError("down", "execute").http_status == 503


def test_to_response_envelope():
    project_id = str(uuid4())
    err = ForbiddenError("Not authorized", "project:update", ErrorContext(project_id=project_id))
    body = err.to_response()["error"]
    assert body["code"] == "FORBIDDEN"
    assert body["message"] == "Not authorized"
    assert body["category"] == "authorization"
    assert body["context"]["project_id"] == project_id
    assert "timestamp" in body


def test_not_found_message_names_resource():
    uid = uuid4()
    err = ResourceNotFoundError("Project", uid)
    assert str(uid) in err.message
    assert err.resource_type == "Project"
