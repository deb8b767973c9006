from pathlib import Path
from typing import Literal

Facet = Literal["access", "default"]


class AclPropError(Exception):
    pass


class InputError(AclPropError):
    pass


class NotFoundError(AclPropError):
    pass


class ContainmentError(AclPropError):
    pass


class AclWriteError(AclPropError):
    path: Path
    facet: Facet
    reason: str

    def __init__(self, path: Path, reason: str, *, facet: Facet = "access") -> None:
        self.path = path
        self.facet = facet
        self.reason = reason
        super().__init__(f"ERROR occurred while applying the {facet} ACL to {path}: {reason}")
