from pathlib import Path

from aclprop.paths.resolve import PathPair


def intermediate_dirs(pair: PathPair) -> tuple[Path, ...]:
    # Walk up from the target, then reverse so the root comes first. A parent
    # must be traversable before any of its children are touched.
    parents: list[Path] = []
    current = pair.target
    while current != pair.root:
        if current.parent == current:
            raise ValueError(f"{pair.target} is not below {pair.root}")
        current = current.parent
        parents.append(current)
    if not parents:
        parents.append(pair.root)
    return tuple(reversed(parents))
