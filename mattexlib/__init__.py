"""
mattex library - unit-scaled drawing surfaces and plugin composition.
"""

from .unit_model import UnitModel, derive_unit
from .plugin_registry import PluginDescriptor, PluginRegistry, UnsatisfiedDependency, install
from .styles import ColorDetails, Properties
from .draw_context import DrawContext
from .surface import Surface
from .presentation import Presentation
from .errors import MattexError, MattexIOError, PluginDescriptorError, PluginDependencyError

__all__ = [
    'UnitModel',
    'derive_unit',
    'PluginDescriptor',
    'PluginRegistry',
    'UnsatisfiedDependency',
    'install',
    'ColorDetails',
    'Properties',
    'DrawContext',
    'Surface',
    'Presentation',
    'MattexError',
    'MattexIOError',
    'PluginDescriptorError',
    'PluginDependencyError',
]
