import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from aclprop.errors import ContainmentError, NotFoundError


@dataclass(frozen=True)
class PathPair:
    root: Path
    target: Path


def resolve_paths(
    root: os.PathLike | str, target: os.PathLike | str, *, allowed_roots: Iterable[os.PathLike | str] = ()
) -> PathPair:
    resolved_root = _canonical_dir(root, "root_path")
    resolved_target = _canonical_dir(target, "target_path")

    # A path-segment check: /data/ab does not contain /data/abc
    if not resolved_target.is_relative_to(resolved_root):
        raise ContainmentError(
            f"ERROR: The target_path: {resolved_target} folder was not found in the root_path: {resolved_root} folder!"
        )

    allowed = [Path(p).resolve() for p in allowed_roots]
    if allowed and not any(resolved_root.is_relative_to(p) for p in allowed):
        raise ContainmentError(
            f"ERROR: The root_path: {resolved_root} is not under any of the allowed roots: "
            f"{', '.join(str(p) for p in allowed)}"
        )

    return PathPair(root=resolved_root, target=resolved_target)


def _canonical_dir(path: os.PathLike | str, label: str) -> Path:
    try:
        resolved = Path(path).resolve(strict=True)
    except (OSError, RuntimeError):
        raise NotFoundError(f"ERROR: {label}: {path} doesn't exist or is invalid!") from None
    if not resolved.is_dir():
        raise NotFoundError(f"ERROR: {label}: {path} doesn't exist or is invalid!")
    return resolved
