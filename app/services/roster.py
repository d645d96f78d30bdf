"""
Roster Reconciliation

An internship program is stored as one row per student. When a coordinator
edits the program's student list we do not wipe and re-create the rows
(that would drop attendance and evaluations of students who stay). Instead
the current roster is compared with the requested one:

    to_keep   = existing & requested   -> update row in place
    to_add    = requested - existing   -> insert a new row
    to_remove = existing - requested   -> delete the row

Pure set algebra, no I/O. Rejecting an empty requested roster is the
caller's job.
"""

from typing import FrozenSet, Iterable, List, NamedTuple


class RosterPlan(NamedTuple):
    to_add: FrozenSet[int]
    to_remove: FrozenSet[int]
    to_keep: FrozenSet[int]

    @property
    def has_changes(self) -> bool:
        return bool(self.to_add or self.to_remove)

    def sorted_add(self) -> List[int]:
        """Ids to insert, ascending. Insert order drives generated codes."""
        return sorted(self.to_add)

    def sorted_remove(self) -> List[int]:
        return sorted(self.to_remove)

    def sorted_keep(self) -> List[int]:
        return sorted(self.to_keep)


def reconcile_roster(existing_ids: Iterable[int], requested_ids: Iterable[int]) -> RosterPlan:
    """
    Partition two rosters into add / remove / keep sets.

    Every requested id lands in exactly one of to_add / to_keep, every
    existing id in exactly one of to_remove / to_keep.
    """
    existing = frozenset(existing_ids)
    requested = frozenset(requested_ids)

    return RosterPlan(
        to_add=requested - existing,
        to_remove=existing - requested,
        to_keep=existing & requested,
    )
