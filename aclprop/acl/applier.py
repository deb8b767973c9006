import os
from pathlib import Path
from typing import Iterator

import click

from aclprop.acl.backend import AclBackend
from aclprop.acl.entry import AclEntry
from aclprop.api.run_config import RunConfig
from aclprop.errors import AclWriteError


def apply_acls(run: RunConfig, backend: AclBackend) -> None:
    """Grant traverse rights up the chain, then full rights down the target tree.

    The chain is handled root-first and completes before the target tree is
    touched. Any failure raises :class:`aclprop.errors.AclWriteError` and stops
    the run where it is. Nothing already written is rolled back.
    """
    apply_traverse(run.chain, run.entry_sets.traverse, backend)
    apply_recursive(run.paths.target, run.entry_sets.full, backend)
    apply_recursive_default(run.paths.target, run.entry_sets.full, backend)


def apply_traverse(chain: tuple[Path, ...], entries: tuple[AclEntry, ...], backend: AclBackend) -> None:
    if not entries:
        click.echo("No user or group entries to grant traverse rights for", err=True)
        return
    for directory in chain:
        click.echo(f"Applying rX ACL to {directory}", err=True)
        backend.merge(directory, entries)


def apply_recursive(target: Path, entries: tuple[AclEntry, ...], backend: AclBackend) -> None:
    access = tuple(entry for entry in entries if not entry.default)
    default = tuple(entry.update(default=False) for entry in entries if entry.default)
    click.echo(f"Applying ACLs recursively to {target}", err=True)
    for path, is_dir in walk_tree(target):
        if access:
            backend.merge(path, access)
        if default and is_dir:
            backend.merge(path, default, default=True)


def apply_recursive_default(target: Path, entries: tuple[AclEntry, ...], backend: AclBackend) -> None:
    default = tuple(entry.update(default=False) for entry in entries)
    if not default:
        return
    click.echo(f"Setting default ACLs on {target}", err=True)
    for path, is_dir in walk_tree(target):
        if is_dir:
            backend.merge(path, default, default=True)


def walk_tree(top: Path) -> Iterator[tuple[Path, bool]]:
    # Symlinks are never followed and never written; Linux keeps no ACL on them
    yield top, True
    for dirpath, dirnames, filenames in os.walk(top, followlinks=False, onerror=_raise):
        base = Path(dirpath)
        for name in sorted(dirnames):
            path = base / name
            if not path.is_symlink():
                yield path, True
        for name in sorted(filenames):
            path = base / name
            if not path.is_symlink():
                yield path, False
        dirnames.sort()


def _raise(error: OSError) -> None:
    raise AclWriteError(Path(error.filename), error.strerror or str(error)) from error
