import os
from dataclasses import dataclass

from aclprop.acl.entry import AclEntry, Principal, PrincipalLookup
from aclprop.errors import InputError, NotFoundError


@dataclass(frozen=True)
class AclFile:
    entries: tuple[AclEntry, ...]

    @classmethod
    def from_string(cls, content: str, *, lookup: PrincipalLookup = Principal.lookup) -> "AclFile":
        entries: list[AclEntry] = []
        for line_number, line in enumerate(content.splitlines(), start=1):
            # getfacl output carries "# file:" headers and "#effective:" trailers
            line = line.split('#', 1)[0].strip()
            for text in line.split(','):
                if not text.strip():
                    continue
                try:
                    entries.append(AclEntry.parse(text, lookup=lookup))
                except InputError as e:
                    raise InputError(f"{e} (line {line_number})") from None
        return cls(tuple(entries))

    @classmethod
    def from_file(cls, path: os.PathLike | str, *, lookup: PrincipalLookup = Principal.lookup) -> "AclFile":
        try:
            with open(path, "r") as f:
                content = f.read()
        except (FileNotFoundError, IsADirectoryError):
            raise NotFoundError(f"ERROR: The ACL file '{path}' wasn't found!") from None
        except OSError as e:
            raise InputError(f"ERROR: The ACL file '{path}' couldn't be read: {e.strerror}") from None
        try:
            return cls.from_string(content, lookup=lookup)
        except (InputError, NotFoundError) as e:
            raise type(e)(f"{e} (ACL file '{path}')") from None

    def to_string(self) -> str:
        return "".join(f"{entry.to_text()}\n" for entry in self.entries)
