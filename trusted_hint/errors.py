"""
trusted_hint.errors
-------------------
Error taxonomy surfaced by the controller.

Configuration problems (ClientNotSetError, ClientMisconfiguredError) are raised
directly. Anything failing once an operation has started talking to the
registry is wrapped in the operation's OperationFailedError subclass, which
keeps the original exception on ``cause``.
"""

from __future__ import annotations
from typing import Optional


class TrustedHintControllerError(Exception):
    pass


class ClientNotSetError(TrustedHintControllerError):
    def __init__(self, client_type: str):
        self.client_type = client_type
        super().__init__(f"{client_type} must be set and properly configured.")


class ClientMisconfiguredError(TrustedHintControllerError):
    pass


class InvalidArgumentError(TrustedHintControllerError, ValueError):
    pass


class InvalidOperationKindError(TrustedHintControllerError, LookupError):
    def __init__(self, kind, has_metadata: Optional[bool] = None):
        self.kind = kind
        self.has_metadata = has_metadata
        detail = "" if has_metadata is None else f" (metadata={has_metadata})"
        super().__init__(f"Unknown signed data type {kind}{detail}")


class DeploymentNotFoundError(TrustedHintControllerError, LookupError):
    pass


# ---------------------------
# Authorization
# ---------------------------
class NotAuthorizedError(TrustedHintControllerError):
    role = None
    relation = "authorized for"

    def __init__(self, client_type: str, address: Optional[str] = None):
        self.client_type = client_type
        self.address = address
        super().__init__(f"Provided {client_type} must be {self.relation} the namespace.")


class NotOwnerError(NotAuthorizedError):
    role = "Owner"
    relation = "the owner of"


class NotDelegateError(NotAuthorizedError):
    role = "Delegate"
    relation = "a delegate of"


# ---------------------------
# Operation failures
# ---------------------------
class OperationFailedError(TrustedHintControllerError):
    def __init__(self, action: str, cause: BaseException):
        self.action = action
        self.cause = cause
        super().__init__(f"Failed to {action}: {cause}")


class HintSetError(OperationFailedError):
    pass


class HintsSetError(OperationFailedError):
    pass


class DelegateManagementError(OperationFailedError):
    pass


class ListStatusError(OperationFailedError):
    pass


class ListOwnerError(OperationFailedError):
    pass


class MetadataOperationError(OperationFailedError):
    pass
