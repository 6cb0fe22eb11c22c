"""
trusted_hint.deployments
------------------------
Resolve the registry address for a chain when the caller does not pass one.

Deployments are read from a JSON manifest (a list of
``{"chainId": ..., "type": ..., "registry": ...}`` objects) given as a file
path or an http(s) URL, either explicitly or via TRUSTED_HINT_DEPLOYMENTS.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional
import json, os

import requests

from .constants import DEPLOYMENT_TYPE_PROXY, DEPLOYMENTS_FETCH_TIMEOUT, ENV_DEPLOYMENTS
from .errors import DeploymentNotFoundError
from .logger import get_logger
from .utils import to_address

log = get_logger("TrustedHint.Deployments")

DeploymentLookup = Callable[[int, str], "Deployment"]


@dataclass(frozen=True)
class Deployment:
    chain_id: int
    type: str
    registry: str

    @classmethod
    def from_dict(cls, data: dict) -> "Deployment":
        return cls(
            chain_id=int(data["chainId"]),
            type=data.get("type", DEPLOYMENT_TYPE_PROXY),
            registry=to_address(data["registry"], "registry"),
        )

    def to_dict(self) -> dict:
        return {"chainId": self.chain_id, "type": self.type, "registry": self.registry}


def load_deployments(source: Optional[str] = None) -> List[Deployment]:
    source = source or os.getenv(ENV_DEPLOYMENTS)
    if not source:
        return []

    if source.startswith(("http://", "https://")):
        log.info(f"[DEPLOYMENTS] fetching {source}")
        res = requests.get(source, timeout=DEPLOYMENTS_FETCH_TIMEOUT)
        res.raise_for_status()
        raw = res.json()
    else:
        raw = json.loads(Path(source).expanduser().read_text())

    return [Deployment.from_dict(d) for d in raw]


def find_deployment(deployments: Iterable[Deployment], chain_id: int, type: str = DEPLOYMENT_TYPE_PROXY) -> Deployment:
    for d in deployments:
        if d.chain_id == chain_id and d.type == type:
            return d
    raise DeploymentNotFoundError(f"No deployment found for chainId {chain_id} and type {type}")


def get_deployment(chain_id: int, type: str = DEPLOYMENT_TYPE_PROXY) -> Deployment:
    """Default lookup: the manifest named by TRUSTED_HINT_DEPLOYMENTS."""
    return find_deployment(load_deployments(), chain_id, type)


def static_lookup(deployments: Iterable[Deployment]) -> DeploymentLookup:
    table = list(deployments)

    def lookup(chain_id: int, type: str = DEPLOYMENT_TYPE_PROXY) -> Deployment:
        return find_deployment(table, chain_id, type)

    return lookup
