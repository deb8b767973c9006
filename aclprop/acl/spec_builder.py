from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from aclprop.acl.acl_file import AclFile
from aclprop.acl.entry import TRAVERSE_PERMISSIONS, AclEntry, Principal


class AclMode(StrEnum):
    entry = 'ENTRY'
    file = 'FILE'


@dataclass(frozen=True)
class SingleEntrySpec:
    principal: Principal
    permissions: str

    @property
    def mode(self) -> AclMode:
        return AclMode.entry


@dataclass(frozen=True)
class FileSpec:
    source: Path
    acl_file: AclFile

    @property
    def mode(self) -> AclMode:
        return AclMode.file


PermissionSpec = SingleEntrySpec | FileSpec


@dataclass(frozen=True)
class EntrySets:
    traverse: tuple[AclEntry, ...]
    full: tuple[AclEntry, ...]


def build_entry_sets(spec: PermissionSpec) -> EntrySets:
    match spec:
        case SingleEntrySpec(principal=principal, permissions=permissions):
            return EntrySets(
                traverse=(AclEntry.for_principal(principal, TRAVERSE_PERMISSIONS),),
                full=(AclEntry.for_principal(principal, permissions),),
            )
        case FileSpec(acl_file=acl_file):
            return EntrySets(traverse=_traverse_entries(acl_file.entries), full=acl_file.entries)
        case _:
            raise ValueError(f"Unknown permission spec: {spec!r}")


def _traverse_entries(entries: tuple[AclEntry, ...]) -> tuple[AclEntry, ...]:
    # Only named users and groups need to reach the target. Owner, mask, other
    # and default-only lines never widen an intermediate directory.
    traverse: dict[Principal, AclEntry] = {}
    for entry in entries:
        if entry.principal is None or entry.default or entry.principal in traverse:
            continue
        traverse[entry.principal] = AclEntry.for_principal(entry.principal, TRAVERSE_PERMISSIONS)
    return tuple(traverse.values())
