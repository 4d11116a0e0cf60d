"""
Discovery of the host interpreter and of importable modules.
"""

from __future__ import annotations

import importlib.util
import logging
import os
import platform
import shutil
import sys
from dataclasses import dataclass
from typing import List, Optional, Tuple

from tfbridge.runtime.deferred import preferred_environment

logger = logging.getLogger(__name__)

RUNTIME_PYTHON_ENV = "TFBRIDGE_RUNTIME_PYTHON"


@dataclass(frozen=True)
class InterpreterConfig:
    python: str
    version: str
    python_versions: Tuple[str, ...]
    required_module: Optional[str] = None
    required_module_path: Optional[str] = None


def module_available(name: str) -> bool:
    """
    True when `name` can be imported. Never raises.
    """
    try:
        return importlib.util.find_spec(name) is not None
    except (ImportError, ValueError) as exc:
        logger.debug("Could not look up module %r: %r", name, exc)
        return False


def module_path(name: str) -> Optional[str]:
    """
    Directory the module `name` is loaded from, or None when it is not found.
    """
    try:
        spec = importlib.util.find_spec(name)
    except (ImportError, ValueError):
        return None
    if spec is None:
        return None
    if spec.submodule_search_locations:
        return list(spec.submodule_search_locations)[0]
    if spec.origin and os.path.isabs(spec.origin):
        return os.path.dirname(spec.origin)
    return None


def _environment_python(environment: str) -> str:
    home = os.environ.get("WORKON_HOME") or os.path.join(
        os.path.expanduser("~"), ".virtualenvs"
    )
    if sys.platform == "win32":
        return os.path.join(home, environment, "Scripts", "python.exe")
    return os.path.join(home, environment, "bin", "python")


def candidate_pythons(environment: Optional[str] = None) -> Tuple[str, ...]:
    """
    Interpreters searched for a module, most preferred first.

    Order: the runtime selection variable, the running interpreter, the
    virtualenv named after `environment`, then ``python3`` and ``python``
    on PATH. Duplicates are dropped.
    """
    candidates: List[str] = []
    selected = os.environ.get(RUNTIME_PYTHON_ENV)
    if selected:
        candidates.append(selected)
    if sys.executable:
        candidates.append(sys.executable)
    if environment is not None:
        candidates.append(_environment_python(environment))
    for command in ("python3", "python"):
        found = shutil.which(command)
        if found:
            candidates.append(found)

    unique: List[str] = []
    for candidate in candidates:
        if candidate not in unique:
            unique.append(candidate)
    return tuple(unique)


def interpreter_config(required_module: Optional[str] = None) -> InterpreterConfig:
    """
    Describe the running interpreter and where `required_module` lives.
    """
    return InterpreterConfig(
        python=sys.executable,
        version=platform.python_version(),
        python_versions=candidate_pythons(preferred_environment()),
        required_module=required_module,
        required_module_path=(
            module_path(required_module) if required_module is not None else None
        ),
    )
