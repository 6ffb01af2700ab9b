from __future__ import annotations

from dataclasses import dataclass
from typing import Union

NO_LICENSE = "No license declared"


@dataclass(frozen=True)
class PackageLicense:
    package: str
    license: str

    @property
    def declared(self) -> bool:
        return self.license != NO_LICENSE

    def as_dict(self) -> dict:
        return {"package": self.package, "license": self.license}


@dataclass(frozen=True)
class ShallowMode:
    """Audit only the dependencies declared in the project manifest."""

    include_dev: bool = True


@dataclass(frozen=True)
class DeepMode:
    """Audit every package physically present under node_modules."""


DependencyMode = Union[ShallowMode, DeepMode]
