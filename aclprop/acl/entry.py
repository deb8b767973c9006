import grp
import pwd
import re
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Callable

from aclprop.errors import InputError, NotFoundError

# Accepted at the interactive prompt
PERMISSION_PATTERN = re.compile(r'^[rwxXtT-]{1,3}$')
# Accepted inside an ACL entry: symbolic permissions or a single octal digit
ENTRY_PERMISSION_PATTERN = re.compile(r'^(?:[rwxX-]+|[0-7])$')

TRAVERSE_PERMISSIONS = "rX"


class PrincipalKind(StrEnum):
    user = 'user'
    group = 'group'


class EntryTag(StrEnum):
    user = 'user'
    group = 'group'
    user_obj = 'user_obj'
    group_obj = 'group_obj'
    mask = 'mask'
    other = 'other'


_NAMED_TAGS = {EntryTag.user: PrincipalKind.user, EntryTag.group: PrincipalKind.group}

_SHORT_PREFIX = {
    EntryTag.user: 'u',
    EntryTag.user_obj: 'u',
    EntryTag.group: 'g',
    EntryTag.group_obj: 'g',
    EntryTag.mask: 'm',
    EntryTag.other: 'o',
}

_KIND_ALIASES = {
    'u': 'user',
    'user': 'user',
    'g': 'group',
    'group': 'group',
    'm': 'mask',
    'mask': 'mask',
    'o': 'other',
    'other': 'other',
}


@dataclass(frozen=True)
class Principal:
    kind: PrincipalKind
    name: str
    id: int

    @classmethod
    def lookup(cls, kind: PrincipalKind | str, name: str) -> "Principal":
        kind = PrincipalKind(kind)
        name = name.strip()
        if not name:
            raise InputError(f"ERROR: A {kind} name is required")
        try:
            if kind == PrincipalKind.user:
                entry_id = pwd.getpwuid(int(name)).pw_uid if name.isdigit() else pwd.getpwnam(name).pw_uid
            else:
                entry_id = grp.getgrgid(int(name)).gr_gid if name.isdigit() else grp.getgrnam(name).gr_gid
        except KeyError:
            raise NotFoundError(f"ERROR: The {kind} '{name}' doesn't exist!") from None
        return cls(kind=kind, name=name, id=entry_id)


PrincipalLookup = Callable[[PrincipalKind, str], Principal]


def permission_bits(permissions: str, *, conditional_execute: bool) -> tuple[bool, bool, bool]:
    """Translate permission text into (read, write, execute).

    ``X`` grants execute only when ``conditional_execute`` is set, which the
    caller does for directories and for files that already have an execute bit.
    """
    if permissions.isdigit():
        value = int(permissions, 8)
        return bool(value & 4), bool(value & 2), bool(value & 1)
    execute = 'x' in permissions or ('X' in permissions and conditional_execute)
    return 'r' in permissions, 'w' in permissions, execute


@dataclass(frozen=True)
class AclEntry:
    tag: EntryTag
    permissions: str
    principal: Principal | None = None
    default: bool = False

    def __post_init__(self) -> None:
        if 't' in self.permissions or 'T' in self.permissions:
            raise InputError(
                f"Invalid ACL permissions: {self.permissions} - the sticky bit (t/T) cannot be set through an ACL entry"
            )
        if not ENTRY_PERMISSION_PATTERN.match(self.permissions):
            raise InputError(
                f"Invalid ACL permissions: {self.permissions} - must be a combination of r, w, x, X and - "
                "or a single octal digit"
            )
        if self.tag in _NAMED_TAGS:
            if self.principal is None or self.principal.kind != _NAMED_TAGS[self.tag]:
                raise InputError(f"A {self.tag} ACL entry requires a {_NAMED_TAGS[self.tag]} principal")
        elif self.principal is not None:
            raise InputError(f"A {self.tag} ACL entry cannot name a principal")

    @classmethod
    def for_principal(cls, principal: Principal, permissions: str, *, default: bool = False) -> "AclEntry":
        tag = EntryTag.user if principal.kind == PrincipalKind.user else EntryTag.group
        return cls(tag=tag, permissions=permissions, principal=principal, default=default)

    @classmethod
    def parse(cls, text: str, *, lookup: PrincipalLookup = Principal.lookup) -> "AclEntry":
        parts = [part.strip() for part in text.strip().split(':')]
        default = False
        if parts[0] in ('d', 'default'):
            default = True
            parts = parts[1:]

        kind = _KIND_ALIASES.get(parts[0]) if parts else None
        if kind in ('mask', 'other') and len(parts) == 2:
            parts = [parts[0], '', parts[1]]
        if kind is None or len(parts) != 3 or not parts[2]:
            raise InputError(f"Invalid ACL entry: {text.strip()}")

        _, name, permissions = parts
        match kind:
            case 'user' if name:
                return cls(EntryTag.user, permissions, lookup(PrincipalKind.user, name), default)
            case 'user':
                return cls(EntryTag.user_obj, permissions, None, default)
            case 'group' if name:
                return cls(EntryTag.group, permissions, lookup(PrincipalKind.group, name), default)
            case 'group':
                return cls(EntryTag.group_obj, permissions, None, default)
            case _ if name:
                raise InputError(f"Invalid ACL entry: {text.strip()} - a {kind} entry cannot name a principal")
            case 'mask':
                return cls(EntryTag.mask, permissions, None, default)
            case _:
                return cls(EntryTag.other, permissions, None, default)

    def bits(self, *, conditional_execute: bool) -> tuple[bool, bool, bool]:
        return permission_bits(self.permissions, conditional_execute=conditional_execute)

    def update(self, *, permissions: str | None = None, default: bool | None = None) -> "AclEntry":
        return replace(
            self,
            permissions=self.permissions if permissions is None else permissions,
            default=self.default if default is None else default,
        )

    def to_text(self) -> str:
        name = self.principal.name if self.principal else ''
        prefix = 'd:' if self.default else ''
        return f"{prefix}{_SHORT_PREFIX[self.tag]}:{name}:{self.permissions}"
