"""Merging per-file fragments into one style model."""

from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

from graph.model import SourceFile
from graph.order import Cycle
from .model import CycleConflict, StyleFragment, StyleModel


def merge(
    ordered_files: Iterable[SourceFile],
    fragments: Mapping[Path, StyleFragment],
    cycles: Iterable[Cycle] = (),
) -> StyleModel:
    """
    Fold fragments into a StyleModel following the resolution order.

    Files are visited dependencies first, so a file's declarations replace
    those of everything it imports, and later imports replace earlier ones.
    Inside one file the last declaration of a name wins. Mixins follow the
    same rule; signatures are not compared.

    Files of one import cycle keep only their own declarations: a member
    never replaces a name another member of the same cycle already set.
    The held-back declaration is recorded as a CycleConflict instead.

    Args:
        ordered_files: Files in resolution order.
        fragments: Extracted declarations keyed by file path. Files without
                   an entry contribute nothing.
        cycles: Cyclic components reported by the orderer.

    Returns:
        The sealed StyleModel.
    """
    component_of: Dict[Path, int] = {}
    for index, cycle in enumerate(cycles):
        for member in cycle.members:
            component_of[member.path] = index

    model = StyleModel()
    for source_file in ordered_files:
        fragment = fragments.get(source_file.path)
        if fragment is None:
            continue
        for variable in sorted(fragment.variables, key=lambda v: v.order):
            current = model.get(variable.name)
            if current is not None and _same_cycle(component_of, current.file, variable.file):
                model.record_conflict(CycleConflict(
                    name=variable.name,
                    kept_file=current.file,
                    ignored_file=variable.file,
                    ignored_value=variable.value,
                    line=variable.line,
                ))
                continue
            model.apply_variable(variable)
        for mixin in sorted(fragment.mixins, key=lambda m: m.order):
            current_mixin = model.get_mixin(mixin.name)
            if current_mixin is not None and _same_cycle(component_of, current_mixin.mixin.file, mixin.file):
                model.record_conflict(CycleConflict(
                    name=mixin.name,
                    kept_file=current_mixin.mixin.file,
                    ignored_file=mixin.file,
                    ignored_value=mixin.signature,
                    line=mixin.line,
                    is_mixin=True,
                ))
                continue
            model.apply_mixin(mixin)
    model.seal()
    return model


def _same_cycle(component_of: Dict[Path, int], first: Path, second: Path) -> bool:
    """True when two different files belong to the same cyclic component."""
    if first == second:
        return False
    component: Optional[int] = component_of.get(first)
    return component is not None and component == component_of.get(second)
