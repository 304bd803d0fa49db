"""Resolve ``module:attribute`` targets to step registries."""

from __future__ import annotations

import sys
from importlib import import_module
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path
from types import ModuleType
from typing import Tuple

from ..errors import RegistryLoadError
from ..harness import StepHarness
from ..registry import StepRegistry


def _split_target(target: str) -> Tuple[str, str]:
    module_part, sep, attr = target.rpartition(":")
    if not sep or not module_part or not attr:
        raise RegistryLoadError(
            f"Invalid target '{target}': expected 'module:attribute' or 'path.py:attribute'"
        )
    return module_part, attr


def _load_module(module_part: str) -> ModuleType:
    if module_part.endswith(".py"):
        path = Path(module_part).expanduser().resolve()
        if not path.is_file():
            raise RegistryLoadError(f"File not found: {path}")
        spec = spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise RegistryLoadError(f"Cannot import {path}")
        module = module_from_spec(spec)
        sys.modules[spec.name] = module
        spec.loader.exec_module(module)
        return module

    if str(Path.cwd()) not in sys.path:
        sys.path.insert(0, str(Path.cwd()))
    try:
        return import_module(module_part)
    except ImportError as e:
        raise RegistryLoadError(f"Cannot import module '{module_part}': {e}") from e


def load_registry(target: str) -> StepRegistry:
    """Import ``target`` and return the :class:`StepRegistry` it names.

    The attribute may also be a :class:`StepHarness`, in which case its
    registry is returned.

    Raises:
        RegistryLoadError: If the module or attribute cannot be resolved.
    """
    module_part, attr = _split_target(target)
    module = _load_module(module_part)

    try:
        obj = getattr(module, attr)
    except AttributeError:
        raise RegistryLoadError(
            f"Module '{module_part}' has no attribute '{attr}'"
        ) from None

    if isinstance(obj, StepHarness):
        return obj.registry
    if isinstance(obj, StepRegistry):
        return obj
    raise RegistryLoadError(
        f"'{target}' is a {type(obj).__name__}, expected StepRegistry or StepHarness"
    )
