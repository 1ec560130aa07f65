"""Project data model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Project:
    """A registered repository: unique name and main checkout path."""

    name: str
    path: str

    def to_dict(self) -> dict:
        return {"name": self.name, "path": self.path}

    def __str__(self) -> str:
        return f"{self.name} @ {self.path}"
