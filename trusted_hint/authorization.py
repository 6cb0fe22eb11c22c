"""
trusted_hint.authorization
--------------------------
Role checks run before any signature or transaction is produced.

The registry answers ownership and delegation questions itself (delegations
expire on-chain), so every check is a fresh read and nothing is cached.
"""

from __future__ import annotations

from .contract import RegistryContract
from .errors import NotDelegateError, NotOwnerError
from .logger import get_logger
from .models import ListCoordinate, Principal, Role

log = get_logger("TrustedHint.Authorization")

_ROLE_QUERIES = {
    Role.OWNER: ("identityIsOwner", NotOwnerError),
    Role.DELEGATE: ("identityIsDelegate", NotDelegateError),
}


class AuthorizationGate:
    def __init__(self, contract: RegistryContract):
        self.contract = contract

    async def has_role(self, coordinate: ListCoordinate, address: str, role: Role) -> bool:
        method, _ = _ROLE_QUERIES[Role(role)]
        return bool(await self.contract.read(method, [coordinate.namespace, coordinate.list, address]))

    async def authorize(self, coordinate: ListCoordinate, principal: Principal, role: Role) -> None:
        """Raise NotOwnerError / NotDelegateError unless ``principal`` holds ``role``."""
        role = Role(role)
        if await self.has_role(coordinate, principal.address, role):
            log.debug(f"[AUTH] {principal.label} {principal.address} is {role.value} of {coordinate.namespace}/{coordinate.list}")
            return
        _, error = _ROLE_QUERIES[role]
        log.warning(f"[AUTH DENIED] {principal.label} {principal.address} is not {role.value} of {coordinate.namespace}/{coordinate.list}")
        raise error(principal.label, principal.address)
