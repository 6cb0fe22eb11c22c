"""
Trusted Hint Controller
=======================
Client-side controller for ERC-7506 trusted hint registries.

Provides:
- TrustedHintController: reads, direct writes, delegated writes and
  EIP-712 meta transactions (signed by one wallet, relayed by another)
- The EIP-712 schema table for every signed registry operation
- A web3.py chain client and env-driven configuration
"""

from .controller import TrustedHintController
from .errors import (
    ClientMisconfiguredError,
    ClientNotSetError,
    DelegateManagementError,
    DeploymentNotFoundError,
    HintSetError,
    HintsSetError,
    InvalidArgumentError,
    InvalidOperationKindError,
    ListOwnerError,
    ListStatusError,
    MetadataOperationError,
    NotAuthorizedError,
    NotDelegateError,
    NotOwnerError,
    OperationFailedError,
    TrustedHintControllerError,
)
from .models import HintCoordinate, ListCoordinate, Principal, Role
from .schemas import OperationKind, get_schema

__all__ = [
    "TrustedHintController",
    "TrustedHintControllerError",
    "ClientNotSetError",
    "ClientMisconfiguredError",
    "InvalidArgumentError",
    "InvalidOperationKindError",
    "DeploymentNotFoundError",
    "NotAuthorizedError",
    "NotOwnerError",
    "NotDelegateError",
    "OperationFailedError",
    "HintSetError",
    "HintsSetError",
    "DelegateManagementError",
    "ListStatusError",
    "ListOwnerError",
    "MetadataOperationError",
    "HintCoordinate",
    "ListCoordinate",
    "Principal",
    "Role",
    "OperationKind",
    "get_schema",
]
