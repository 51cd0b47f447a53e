"""Fleet and Station lookup entities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Fleet:
    id: str
    name: str


@dataclass(frozen=True)
class Station:
    id: str
    name: str
