"""Value types and request records for the scoped filesystem."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scopefs.errors import InvalidArgumentError

_KIBI = 1024


@dataclass(frozen=True, slots=True)
class FileMode:
    """Numeric permission mode (e.g. 0o755)."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0o7777:
            raise InvalidArgumentError(
                f"Invalid file mode: {self.value:#o}",
                mode=self.value,
            )

    @classmethod
    def parse(cls, mode: "FileMode | int | str") -> "FileMode":
        """Parse a mode from an int or an octal-digit string ("755")."""
        if isinstance(mode, FileMode):
            return mode
        if isinstance(mode, bool):
            raise InvalidArgumentError(f"Invalid file mode: {mode!r}", mode=mode)
        if isinstance(mode, int):
            return cls(mode)
        if isinstance(mode, str):
            text = mode.strip()
            if text.lower().startswith("0o"):
                text = text[2:]
            try:
                return cls(int(text, 8))
            except ValueError as exc:
                raise InvalidArgumentError(
                    f"Invalid file mode: {mode!r}", mode=mode
                ) from exc
        raise InvalidArgumentError(f"Invalid file mode: {mode!r}", mode=mode)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"{self.value:o}"


class FileSize(int):
    """Size in bytes, with binary-unit views."""

    @property
    def bytes(self) -> int:
        return int(self)

    @property
    def kibibytes(self) -> float:
        return int(self) / _KIBI

    @property
    def mebibytes(self) -> float:
        return int(self) / _KIBI**2

    @property
    def gibibytes(self) -> float:
        return int(self) / _KIBI**3

    def __repr__(self) -> str:
        return f"FileSize({int(self)})"


def as_path_list(value: str | Sequence[str]) -> list[str]:
    if isinstance(value, str):
        return [value]
    return list(value)


class TransferRequest(BaseModel):
    """Sources and destination of a copy or move."""

    model_config = ConfigDict(frozen=True)

    sources: list[str] = Field(min_length=1)
    destination: str = Field(min_length=1)

    @field_validator("sources", mode="before")
    @classmethod
    def _coerce_sources(cls, value):
        if isinstance(value, str):
            return [value]
        return value

    @property
    def is_fan_in(self) -> bool:
        """True when several sources go into one destination directory."""
        return len(self.sources) > 1


class TouchOptions(BaseModel):
    """Options passed through to the platform touch."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    mtime: datetime | float | None = None
    mode: FileMode | None = None

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value):
        if value is None:
            return None
        return FileMode.parse(value)


class RemoveOptions(BaseModel):
    """Options for recursive removal."""

    model_config = ConfigDict(frozen=True)

    force: bool = False


class ChmodOptions(BaseModel):
    """Options for permission changes."""

    model_config = ConfigDict(frozen=True)

    recursive: bool = False
