import grp
import os
import pwd
from pathlib import Path
from typing import Callable, Generator, Iterable
from unittest.mock import patch

import posix1e
import pytest

from aclprop.acl.backend import AclBackend
from aclprop.acl.entry import AclEntry, Principal, PrincipalKind
from aclprop.errors import AclWriteError, NotFoundError

_FAKE_IDS = {
    (PrincipalKind.user, "alice"): 1001,
    (PrincipalKind.user, "bob"): 1002,
    (PrincipalKind.group, "staff"): 2001,
    (PrincipalKind.group, "devs"): 2002,
}

MergeCall = tuple[Path, tuple[AclEntry, ...], bool]


class RecordingBackend(AclBackend):
    calls: list[MergeCall]
    fail_on: set[Path]

    def __init__(self, fail_on: Iterable[Path] = ()) -> None:
        self.calls = []
        self.fail_on = set(fail_on)

    def merge(self, path: Path, entries: Iterable[AclEntry], *, default: bool = False) -> None:
        if path in self.fail_on:
            raise AclWriteError(path, "Operation not supported", facet="default" if default else "access")
        self.calls.append((path, tuple(entries), default))

    def paths(self, *, default: bool = False) -> list[Path]:
        return [path for path, _, is_default in self.calls if is_default == default]


def fake_lookup(kind: PrincipalKind | str, name: str) -> Principal:
    kind = PrincipalKind(kind)
    try:
        return Principal(kind=kind, name=name, id=_FAKE_IDS[(kind, name)])
    except KeyError:
        raise NotFoundError(f"ERROR: The {kind} '{name}' doesn't exist!") from None


@pytest.fixture
def lookup() -> Callable[[PrincipalKind | str, str], Principal]:
    return fake_lookup


@pytest.fixture
def alice() -> Principal:
    return fake_lookup(PrincipalKind.user, "alice")


@pytest.fixture
def staff() -> Principal:
    return fake_lookup(PrincipalKind.group, "staff")


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def make_backend() -> type[RecordingBackend]:
    return RecordingBackend


@pytest.fixture
def current_user() -> str:
    return pwd.getpwuid(os.getuid()).pw_name


@pytest.fixture
def current_group() -> str:
    return grp.getgrgid(os.getgid()).gr_name


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    # tmp_path/srv/data/proj/reports/{q1/summary.txt, notes.txt, run.sh}
    reports = tmp_path / "srv" / "data" / "proj" / "reports"
    (reports / "q1").mkdir(parents=True)
    (reports / "q1" / "summary.txt").write_text("summary")
    (reports / "notes.txt").write_text("notes")
    (reports / "run.sh").write_text("#!/bin/sh\n")
    (reports / "run.sh").chmod(0o755)
    return tmp_path


@pytest.fixture
def acl_tree(tree: Path) -> Path:
    probe = tree / "probe"
    probe.mkdir()
    try:
        acl = posix1e.ACL(file=str(probe))
        entry = acl.append()
        entry.tag_type = posix1e.ACL_USER
        entry.qualifier = os.getuid()
        entry.permset.read = True
        acl.calc_mask()
        acl.applyto(str(probe))
    except OSError:
        pytest.skip("filesystem does not support POSIX ACLs")
    finally:
        probe.rmdir()
    return tree


@pytest.fixture(autouse=True)
def no_config_files() -> Generator[None, None, None]:
    with patch("aclprop.commands.load_config.get_config_paths", return_value=[]):
        yield
