"""
Stage results: a parsed value or a single coded failure, never both.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Union

from .stages import Stage


@dataclass(frozen=True)
class Parsed:
    """A value a stage gate accepted."""
    value: Any


@dataclass(frozen=True)
class StageFailure:
    """The first rejection of a call."""
    stage: Stage
    detail: str

    @property
    def code(self) -> int:
        return self.stage.code

    @property
    def message(self) -> str:
        return self.stage.message(self.detail)


StageResult = Union[Parsed, StageFailure]


class ParsedArguments(Mapping[str, Any]):
    """Every gated value of a call, keyed by gate name."""

    def __init__(self, values: Mapping[str, Any]):
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ParsedArguments({dict(self._values)!r})"
