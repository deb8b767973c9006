import os
from pathlib import Path
from typing import Callable

import click

from aclprop.acl.acl_file import AclFile
from aclprop.acl.applier import apply_acls
from aclprop.acl.backend import AclBackend, DryRunBackend, PosixAclBackend
from aclprop.acl.spec_builder import FileSpec, PermissionSpec
from aclprop.api import RunConfig
from aclprop.commands.prompt_spec import prompt_permission_spec
from aclprop.config import Config
from aclprop.paths.resolve import resolve_paths


def propagate_acls(
    root: os.PathLike | str,
    target: os.PathLike | str,
    acl_file: os.PathLike | str | None,
    *,
    config: Config,
    dry_run: bool = False,
    ask: Callable[[str], str] | None = None,
    backend: AclBackend | None = None,
) -> RunConfig:
    paths = resolve_paths(root, target, allowed_roots=config.allowed_roots)

    spec: PermissionSpec
    if acl_file is None:
        spec = prompt_permission_spec(config.default_permissions, ask=ask)
    else:
        spec = FileSpec(source=Path(acl_file), acl_file=AclFile.from_file(acl_file))

    run = RunConfig.build(paths, spec, dry_run=dry_run)
    if backend is None:
        backend = DryRunBackend() if run.dry_run else PosixAclBackend()

    if run.dry_run:
        source = f" from {spec.source}" if isinstance(spec, FileSpec) else ""
        click.echo(f"Dry run: {run.mode} mode, entries{source} to apply recursively to {run.paths.target}:", err=True)
        click.echo(AclFile(run.entry_sets.full).to_string(), nl=False, err=True)

    apply_acls(run, backend)

    if run.dry_run:
        click.echo("\nDry run: no ACL permissions were changed.\n")
    else:
        click.echo("\nThe ACL permissions have been successfully set!\n")
    return run
