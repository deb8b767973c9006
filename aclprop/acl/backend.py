import os
import stat
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

import click
import posix1e

from aclprop.acl.entry import AclEntry, EntryTag
from aclprop.errors import AclWriteError

_TAG_TYPES = {
    EntryTag.user: posix1e.ACL_USER,
    EntryTag.group: posix1e.ACL_GROUP,
    EntryTag.user_obj: posix1e.ACL_USER_OBJ,
    EntryTag.group_obj: posix1e.ACL_GROUP_OBJ,
    EntryTag.mask: posix1e.ACL_MASK,
    EntryTag.other: posix1e.ACL_OTHER,
}

_BASE_TAG_TYPES = (posix1e.ACL_USER_OBJ, posix1e.ACL_GROUP_OBJ, posix1e.ACL_OTHER)
_NAMED_TAG_TYPES = (posix1e.ACL_USER, posix1e.ACL_GROUP)


class AclBackend(ABC):
    @abstractmethod
    def merge(self, path: Path, entries: Iterable[AclEntry], *, default: bool = False) -> None:  # pragma: no cover
        """Add or overwrite ``entries`` in one ACL facet of ``path``, keeping unrelated entries."""
        pass


class PosixAclBackend(AclBackend):
    """Merges entries the way ``setfacl -m`` does, through libacl."""

    def merge(self, path: Path, entries: Iterable[AclEntry], *, default: bool = False) -> None:
        entries = list(entries)
        facet = "default" if default else "access"
        try:
            mode = os.lstat(path).st_mode
            if default and not stat.S_ISDIR(mode):
                raise AclWriteError(path, "only directories can have default ACLs", facet=facet)

            acl = self._load(path, default=default)
            conditional_execute = default or stat.S_ISDIR(mode) or bool(mode & 0o111)
            for entry in entries:
                self._set_entry(acl, entry, conditional_execute=conditional_execute)

            explicit_mask = any(entry.tag == EntryTag.mask for entry in entries)
            if not explicit_mask and _has_named_entries(acl):
                acl.calc_mask()

            if not acl.valid():
                raise AclWriteError(path, f"the resulting ACL is invalid: {acl.to_any_text()!r}", facet=facet)

            if default:
                acl.applyto(str(path), posix1e.ACL_TYPE_DEFAULT)
            else:
                acl.applyto(str(path))
        except OSError as e:
            raise AclWriteError(path, e.strerror or str(e), facet=facet) from e

    def _load(self, path: Path, *, default: bool) -> posix1e.ACL:
        if not default:
            return posix1e.ACL(file=str(path))
        acl = posix1e.ACL(filedef=str(path))
        if not any(True for _ in acl):
            # An empty default ACL starts from the owner, group and other
            # entries of the access ACL
            for entry in posix1e.ACL(file=str(path)):
                if entry.tag_type in _BASE_TAG_TYPES:
                    acl.append(entry)
        return acl

    def _set_entry(self, acl: posix1e.ACL, entry: AclEntry, *, conditional_execute: bool) -> None:
        tag_type = _TAG_TYPES[entry.tag]
        qualifier = entry.principal.id if entry.principal else None
        target = _find_entry(acl, tag_type, qualifier)
        if target is None:
            target = acl.append()
            target.tag_type = tag_type
            if qualifier is not None:
                target.qualifier = qualifier
        read, write, execute = entry.bits(conditional_execute=conditional_execute)
        permset = target.permset
        permset.read = read
        permset.write = write
        permset.execute = execute


class DryRunBackend(AclBackend):
    def merge(self, path: Path, entries: Iterable[AclEntry], *, default: bool = False) -> None:
        facet = "default" if default else "access"
        text = ",".join(entry.to_text() for entry in entries)
        click.echo(f"Dry run: would merge {text} into the {facet} ACL of {path}", err=True)


def _find_entry(acl: posix1e.ACL, tag_type: int, qualifier: int | None) -> posix1e.Entry | None:
    for entry in acl:
        if entry.tag_type != tag_type:
            continue
        if tag_type not in _NAMED_TAG_TYPES or entry.qualifier == qualifier:
            return entry
    return None


def _has_named_entries(acl: posix1e.ACL) -> bool:
    return any(entry.tag_type in _NAMED_TAG_TYPES or entry.tag_type == posix1e.ACL_MASK for entry in acl)
