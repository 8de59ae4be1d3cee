# twinbank - Two-bank Images, No Kludges
# SPDX-License-Identifier Apache-2.0

class LayoutError(ValueError):
    pass

class ConfigurationError(LayoutError):
    """An unrecognized plan, update mode or image setting."""
    pass

class ArithmeticRangeError(LayoutError):
    """A computed partition size is not a positive number of MiB."""
    pass

class IntrospectionParseError(LayoutError):
    """An existing image lacks a partition or has unparseable fields for one."""
    pass

class LayoutMismatchError(LayoutError):
    """The layout of an existing image differs from the computed one."""

    def __init__(self, keys, message):
        self.keys = keys
        super().__init__(message)
