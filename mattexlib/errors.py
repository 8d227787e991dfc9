"""
Exception types raised by mattex.
"""


class MattexError(Exception):
    """Base error for the drawing library"""


class MattexIOError(MattexError):
    """An image could not be read or written"""


class PluginDescriptorError(MattexError, ValueError):
    """A plugin descriptor is malformed"""


class PluginDependencyError(MattexError):
    """
    One or more plugins require plugins that were not supplied.

    The full list of unmet dependencies is kept in ``errors``.
    """

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("\n".join(error.message for error in self.errors))
