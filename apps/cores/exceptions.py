from rest_framework import status
from rest_framework.exceptions import APIException


class WorkflowError(APIException):
    """
    Base class for every failure a workflow operation can report.
    Each subclass is one kind of result the presentation layer can render.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be completed."
    default_code = "workflow_error"
    retryable = False


class NotAuthenticated(WorkflowError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"
    default_code = "not_authenticated"


class NotFound(WorkflowError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"
    default_code = "not_found"


class Unauthorized(WorkflowError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Unauthorized"
    default_code = "unauthorized"


class InvalidState(WorkflowError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Operation not allowed in the current status."
    default_code = "invalid_state"


class Conflict(WorkflowError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The record was changed by another request."
    default_code = "conflict"


class ValidationFailed(WorkflowError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "validation_error"


class DeadlinePassed(WorkflowError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Submission deadline has passed"
    default_code = "deadline_passed"


class StoreError(WorkflowError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Storage is temporarily unavailable. Please retry."
    default_code = "store_error"
    retryable = True


class PartialFailure(WorkflowError):
    # Only raised if a multi-step operation ever runs outside a transaction.
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Operation was only partially applied."
    default_code = "partial_failure"
