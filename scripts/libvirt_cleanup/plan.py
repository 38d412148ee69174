from __future__ import annotations

from typing import List, Tuple

from .model import (
    Action,
    DeleteVolume,
    DestroyDomain,
    DomainState,
    Inventory,
    UndefineDomain,
)
from .scope import ScopeRule


def build_plan(inventory: Inventory, scope: ScopeRule) -> Tuple[Action, ...]:
    """
    Ordered, immutable plan for one inventory snapshot.

    Domains come first in inventory order; a running domain is destroyed before
    it is undefined. Volumes follow in inventory order and do not depend on any
    domain action.
    """
    actions: List[Action] = []

    def add(cls, *args: str) -> None:
        actions.append(cls(*args, order=len(actions)))

    for dom in inventory.domains:
        if not scope.matches_domain(dom.name):
            continue
        if dom.state is DomainState.RUNNING:
            add(DestroyDomain, dom.name)
        add(UndefineDomain, dom.name)

    for vol in inventory.volumes:
        if scope.matches_volume(vol.name):
            add(DeleteVolume, vol.pool, vol.name)

    return tuple(actions)
