from dataclasses import dataclass
from pathlib import Path

from aclprop.acl.spec_builder import AclMode, EntrySets, PermissionSpec, build_entry_sets
from aclprop.paths.chain import intermediate_dirs
from aclprop.paths.resolve import PathPair


@dataclass(frozen=True)
class RunConfig:
    paths: PathPair
    chain: tuple[Path, ...]
    mode: AclMode
    entry_sets: EntrySets
    dry_run: bool = False

    @classmethod
    def build(cls, paths: PathPair, spec: PermissionSpec, *, dry_run: bool = False) -> 'RunConfig':
        return cls(
            paths=paths,
            chain=intermediate_dirs(paths),
            mode=spec.mode,
            entry_sets=build_entry_sets(spec),
            dry_run=dry_run,
        )
