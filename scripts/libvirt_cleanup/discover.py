from __future__ import annotations

from typing import List

from .model import Domain, DomainState, Inventory, Volume
from .virsh import Virsh, parse_name_list, parse_vol_list


def list_domains(virsh: Virsh) -> List[Domain]:
    """
    All defined domains with their state, in `virsh list --all` order.

    State comes from the running/shutoff filtered name listings, not from
    `domstate` text. Raises VirshError if the daemon cannot be queried.
    """
    names = parse_name_list(virsh.text(["list", "--all", "--name"]))
    if not names:
        return []
    running = set(parse_name_list(virsh.text(["list", "--name", "--state-running"])))
    shutoff = set(parse_name_list(virsh.text(["list", "--name", "--state-shutoff"])))

    domains = []
    for name in names:
        if name in running:
            state = DomainState.RUNNING
        elif name in shutoff:
            state = DomainState.STOPPED
        else:
            state = DomainState.OTHER
        domains.append(Domain(name=name, state=state))
    return domains


def pool_exists(virsh: Virsh, pool: str) -> bool:
    return virsh.run(["pool-info", pool]).rc == 0


def list_volumes(virsh: Virsh, pool: str) -> List[Volume]:
    return [Volume(name=n, pool=pool) for n in parse_vol_list(virsh.text(["vol-list", pool]))]


def collect_inventory(virsh: Virsh, pool: str) -> Inventory:
    """
    Single inventory snapshot for one run. A missing pool yields no volumes and
    `pool_found=False`; any other query failure propagates as VirshError.
    """
    domains = list_domains(virsh)
    if not pool_exists(virsh, pool):
        return Inventory(domains=domains, volumes=[], pool_found=False)
    return Inventory(domains=domains, volumes=list_volumes(virsh, pool), pool_found=True)
