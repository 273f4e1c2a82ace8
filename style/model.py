"""Style data model: per-file declarations and the merged global model."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Variable:
    """A top-level `@name: value;` binding declared in one file."""

    file: Path
    name: str
    value: str
    order: int  # position among the file's declarations
    line: int = 0


@dataclass(frozen=True)
class Mixin:
    """
    A top-level `.name(params) { ... }` definition.

    The body is the full block text and is never interpreted.
    """

    file: Path
    name: str
    params: str
    body: str
    guard: Optional[str] = None
    order: int = 0
    line: int = 0

    @property
    def signature(self) -> str:
        sig = f".{self.name}({self.params})"
        return f"{sig} when {self.guard}" if self.guard else sig


@dataclass(frozen=True)
class MalformedDeclaration:
    """A top-level statement the extractor could not read."""

    line: int
    text: str
    detail: str


@dataclass
class StyleFragment:
    """Declarations one file contributes, in file order."""

    variables: List[Variable] = field(default_factory=list)
    mixins: List[Mixin] = field(default_factory=list)
    malformed: List[MalformedDeclaration] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.malformed


@dataclass
class VariableEntry:
    """Winning value for one variable name plus the values it overrode."""

    name: str
    value: str
    file: Path
    line: int = 0
    shadowed_by: List[Tuple[Path, str]] = field(default_factory=list)


@dataclass
class MixinEntry:
    """Winning definition for one mixin name plus the definitions it overrode."""

    name: str
    mixin: Mixin
    shadowed_by: List[Tuple[Path, str]] = field(default_factory=list)


@dataclass(frozen=True)
class CycleConflict:
    """
    A declaration left out of the model because another file of the same
    import cycle had already set the name.
    """

    name: str
    kept_file: Path
    ignored_file: Path
    ignored_value: str
    line: int = 0
    is_mixin: bool = False


class StyleModel:
    """
    The flattened style model of a run.

    Every variable name maps to exactly one final value. Names keep the
    order in which they were first declared along the resolution order.
    Once merging is done the model is sealed and rejects further writes.
    """

    def __init__(self):
        self._variables: Dict[str, VariableEntry] = {}
        self._mixins: Dict[str, MixinEntry] = {}
        self._conflicts: List[CycleConflict] = []
        self._sealed = False

    @property
    def variables(self) -> Dict[str, VariableEntry]:
        """Return a copy of the variable entries keyed by name."""
        return dict(self._variables)

    @property
    def mixins(self) -> Dict[str, MixinEntry]:
        """Return a copy of the mixin entries keyed by name."""
        return dict(self._mixins)

    @property
    def conflicts(self) -> List[CycleConflict]:
        """Declarations held back inside import cycles, in merge order."""
        return list(self._conflicts)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        self._sealed = True

    def apply_variable(self, variable: Variable) -> None:
        """
        Declare a variable; a later declaration replaces the current winner.

        The replaced winner is appended to the entry's shadow chain.
        """
        self._check_writable()
        entry = self._variables.get(variable.name)
        if entry is None:
            self._variables[variable.name] = VariableEntry(
                name=variable.name,
                value=variable.value,
                file=variable.file,
                line=variable.line,
            )
            return
        entry.shadowed_by.append((entry.file, entry.value))
        entry.value = variable.value
        entry.file = variable.file
        entry.line = variable.line

    def apply_mixin(self, mixin: Mixin) -> None:
        """Declare a mixin with the same later-wins rule as variables."""
        self._check_writable()
        entry = self._mixins.get(mixin.name)
        if entry is None:
            self._mixins[mixin.name] = MixinEntry(name=mixin.name, mixin=mixin)
            return
        entry.shadowed_by.append((entry.mixin.file, entry.mixin.signature))
        entry.mixin = mixin

    def get(self, name: str) -> Optional[VariableEntry]:
        return self._variables.get(name)

    def get_mixin(self, name: str) -> Optional[MixinEntry]:
        return self._mixins.get(name)

    def record_conflict(self, conflict: CycleConflict) -> None:
        self._check_writable()
        self._conflicts.append(conflict)

    def value_of(self, name: str) -> Optional[str]:
        entry = self._variables.get(name)
        return entry.value if entry else None

    def iter_variables(self) -> Iterator[VariableEntry]:
        return iter(list(self._variables.values()))

    def _check_writable(self) -> None:
        if self._sealed:
            raise RuntimeError("StyleModel is sealed and can no longer be modified")

    def __len__(self) -> int:
        return len(self._variables)

    def __contains__(self, name: str) -> bool:
        return name in self._variables

    def __repr__(self) -> str:
        return f"StyleModel(variables={len(self._variables)}, mixins={len(self._mixins)}, sealed={self._sealed})"
