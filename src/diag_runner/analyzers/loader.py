"""Analyzer plugin loader.

A plugin is a Python source file.  Loading it imports the module under a
private name and instantiates every concrete ``Analyzer`` subclass the
module defines itself (analyzers it merely imports are skipped).
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path

from diag_runner.analyzers import Analyzer, AnalyzerDescriptor
from diag_runner.errors import PluginLoadError

logger = logging.getLogger(__name__)

PLUGIN_SUFFIXES = (".py",)


def _module_name(path: Path) -> str:
    return f"_diag_runner_plugin_{path.stem}_{abs(hash(str(path))):x}"


def import_plugin(path: str | Path):
    """Import the plugin file at *path* and return the module object.

    Raises:
        PluginLoadError: If the module spec cannot be built or executing
            the module raises.
    """
    plugin_path = Path(path).resolve()
    name = _module_name(plugin_path)

    spec = importlib.util.spec_from_file_location(name, plugin_path)
    if spec is None or spec.loader is None:
        raise PluginLoadError(f"Unable to load plugin module '{plugin_path}'", str(plugin_path))

    module = importlib.util.module_from_spec(spec)
    # Registered before exec so dataclasses and pickling inside the plugin work.
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(name, None)
        raise PluginLoadError(f"Failed to import plugin '{plugin_path}': {e}", str(plugin_path)) from e
    return module


def analyzer_types(module) -> list[type[Analyzer]]:
    """Concrete ``Analyzer`` subclasses defined in *module*, sorted by name."""
    found: list[type[Analyzer]] = []
    for _, obj in inspect.getmembers(module, inspect.isclass):
        if not issubclass(obj, Analyzer) or obj is Analyzer:
            continue
        if inspect.isabstract(obj):
            continue
        if obj.__module__ != module.__name__:
            continue
        found.append(obj)
    return sorted(found, key=lambda t: t.__name__)


def load_analyzers(path: str | Path) -> list[AnalyzerDescriptor]:
    """Import *path* and instantiate every analyzer it defines.

    A constructor failure is not wrapped: the plugin's own exception
    propagates so the root cause is what the operator sees.
    """
    module = import_plugin(path)
    descriptors: list[AnalyzerDescriptor] = []
    for analyzer_type in analyzer_types(module):
        analyzer = analyzer_type()
        descriptor = AnalyzerDescriptor.of(analyzer)
        logger.debug(
            "Loaded analyzer %s (%d rules)",
            analyzer.id,
            len(descriptor.supported_rule_ids),
        )
        descriptors.append(descriptor)
    if not descriptors:
        logger.warning("Plugin '%s' defines no analyzers", path)
    return descriptors
