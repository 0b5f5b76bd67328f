"""
Source Selector

Chooses the backup source: the running member with the highest observed
revision. Probing and choosing are kept apart: every candidate is probed
into a list of observations first, then the maximum is computed by an
explicit fold over that list, so the choice depends only on the successful
observations and their order.

Tie-break: comparison is strictly-greater, so the first member (in input
order) to report the maximum revision wins.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import reduce
from typing import Iterable, List, Optional, Sequence, Tuple

from cluster_membership import EtcdMember
from ..exceptions import NoReachableMemberError, NoRunningMembersError
from ..models.entities import RevisionObservation
from .prober import RevisionProber

logger = logging.getLogger(__name__)


def _keep_greater(
    best: Optional[RevisionObservation],
    candidate: RevisionObservation
) -> Optional[RevisionObservation]:
    if not candidate.succeeded:
        return best
    if best is None or candidate.revision > best.revision:
        return candidate
    return best


def select_max_revision(observations: Iterable[RevisionObservation]) -> Optional[RevisionObservation]:
    """
    The first successful observation carrying the maximum revision.

    Returns None when no observation succeeded.
    """
    return reduce(_keep_greater, observations, None)


class SourceSelector:
    """
    Probes candidate members and picks the one with the highest revision.

    Probing is sequential by default. With ``probe_workers > 1`` members are
    probed concurrently; results are still collected in input order, so the
    first-seen-wins tie-break is unchanged.

    Example:
        ```python
        selector = SourceSelector(RevisionProber(factory, tls))
        member, revision = selector.select(candidates, cluster_name="example")
        ```
    """

    def __init__(self, prober: RevisionProber, probe_workers: int = 1):
        if probe_workers < 1:
            raise ValueError("probe_workers must be at least 1")
        self._prober = prober
        self.probe_workers = probe_workers

    def probe_all(self, members: Sequence[EtcdMember]) -> List[RevisionObservation]:
        """Probe every member, returning observations in input order."""
        if self.probe_workers == 1 or len(members) <= 1:
            return [self._prober.probe(m) for m in members]

        workers = min(self.probe_workers, len(members))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="EtcdProbe") as executor:
            return list(executor.map(self._prober.probe, members))

    def select(
        self,
        members: Sequence[EtcdMember],
        cluster_name: Optional[str] = None
    ) -> Tuple[EtcdMember, int]:
        """
        Pick the member with the maximum revision.

        Args:
            members: Candidate members, already restricted to running ones
            cluster_name: Used for error reporting only

        Returns:
            Tuple of (selected member, its revision)

        Raises:
            NoRunningMembersError: If ``members`` is empty
            NoReachableMemberError: If every probe failed
        """
        if not members:
            raise NoRunningMembersError(cluster_name=cluster_name)

        observations = self.probe_all(members)
        best = select_max_revision(observations)
        if best is None:
            failures = {o.member.name: o.error for o in observations}
            raise NoReachableMemberError(cluster_name=cluster_name, context={"failures": failures})

        logger.info(
            f"Selected member {best.member.name} with max revision {best.revision} "
            f"({sum(o.succeeded for o in observations)}/{len(observations)} members reachable)"
        )
        return best.member, best.revision
