from fastapi import HTTPException

from app.domain.exceptions import (
    AuthorizationError,
    BusinessRuleError,
    NotFoundError,
    SchedulingError,
    StateError,
    ValidationError,
)


def http_error(error: SchedulingError) -> HTTPException:
    if isinstance(error, ValidationError):
        status_code = 400
    elif isinstance(error, AuthorizationError):
        status_code = 403
    elif isinstance(error, NotFoundError):
        status_code = 404
    elif isinstance(error, (BusinessRuleError, StateError)):
        status_code = 409
    else:
        status_code = 400
    return HTTPException(status_code=status_code, detail={"code": error.code, "message": error.message})
