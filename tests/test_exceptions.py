"""Translation of database IntegrityErrors into API errors."""
import pytest
from sqlalchemy.exc import IntegrityError

from projectdesk.core.exceptions import ConflictError, ValidationError, integrity_error


class PgError(Exception):
    def __init__(self, message, pgcode):
        super().__init__(message)
        self.pgcode = pgcode


@pytest.mark.parametrize("orig,expected", [
    (Exception("UNIQUE constraint failed: users.email, users.tenant_id"), ConflictError),
    (PgError('duplicate key value violates unique constraint "uq_users_email_tenant"', "23505"), ConflictError),
    (Exception("NOT NULL constraint failed: projects.created_by"), ValidationError),
    (PgError('null value in column "tenant_id" of relation "projects"', "23502"), ValidationError),
    (Exception("FOREIGN KEY constraint failed"), ValidationError),
])
def test_integrity_error_classification(orig, expected):
    error = integrity_error(IntegrityError("INSERT ...", {}, orig))
    assert isinstance(error, expected)


def test_not_null_names_the_column():
    sqlite_error = integrity_error(IntegrityError("", {}, Exception("NOT NULL constraint failed: projects.tenant_id")))
    pg_error = integrity_error(IntegrityError("", {}, PgError('null value in column "created_by" violates', "23502")))

    assert sqlite_error.detail == "Missing required field: projects.tenant_id"
    assert pg_error.detail == "Missing required field: created_by"
