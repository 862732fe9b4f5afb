"""Statement records produced by the processors and consumed by the graph engine."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath

from pydantic import BaseModel, ConfigDict, Field

from sqlsmith.models.dialect import Dialect


class StatementType(str, Enum):
    """Kind of schema object a statement creates."""

    TABLE = "table"
    VIEW = "view"
    SEQUENCE = "sequence"
    INDEX = "index"
    FUNCTION = "function"


class Dependency(BaseModel):
    """A reference from one statement to another schema object."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Name of the referenced object.",
    )
    type: StatementType = Field(
        default=StatementType.TABLE,
        description="Kind of the referenced object, as far as the processor can tell.",
    )


class StatementRecord(BaseModel):
    """One schema-defining statement with its outgoing dependencies.

    Records are the only shape the dependency engine understands: the
    processors derive them from parsed SQL, and everything downstream
    (graph, validators, sorter, formatter) works on them exclusively.
    ``raw_content`` is carried through untouched for output.
    """

    model_config = ConfigDict(frozen=True)

    type: StatementType = Field(
        ...,
        description="Kind of object this statement creates.",
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Name of the object being created, e.g. 'users'.",
    )
    depends_on: list[Dependency] = Field(
        default_factory=list,
        description="Objects referenced by this statement's definition.",
    )
    source_file: str = Field(
        ...,
        description="Path of the file the statement was read from.",
    )
    raw_content: str = Field(
        default="",
        description="Original statement text, opaque to the dependency engine.",
    )
    line_number: int | None = Field(
        default=None,
        ge=1,
        description="1-based line where the statement starts in its file.",
    )

    @property
    def dependency_names(self) -> list[str]:
        """Referenced names, deduplicated, in first-seen order."""
        return list(dict.fromkeys(dep.name for dep in self.depends_on))

    @property
    def non_self_dependency_names(self) -> list[str]:
        """Like :attr:`dependency_names`, without a reference to :attr:`name`."""
        return [dep for dep in self.dependency_names if dep != self.name]

    @property
    def file_name(self) -> str:
        """Base name of :attr:`source_file`."""
        return PurePath(self.source_file).name or self.source_file

    @property
    def is_self_referencing(self) -> bool:
        """True if the definition references the object it creates."""
        return any(dep.name == self.name for dep in self.depends_on)

    def with_content(self, raw_content: str) -> StatementRecord:
        """Return a copy with ``raw_content`` replaced."""
        return self.model_copy(update={"raw_content": raw_content})


class SqlFile(BaseModel):
    """A SQL source file and the statements extracted from it, in file order."""

    path: str = Field(
        ...,
        description="Path of the file on disk.",
    )
    content: str = Field(
        default="",
        description="Full file text.",
    )
    statements: list[StatementRecord] = Field(
        default_factory=list,
        description="Definitions found in the file, in declaration order.",
    )
    dialect: Dialect = Field(
        default=Dialect.POSTGRESQL,
        description="Dialect the file was parsed with.",
    )

    @property
    def name(self) -> str:
        return PurePath(self.path).name or self.path
