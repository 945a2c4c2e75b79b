"""Version information for the drone-editor package."""

BASE_VERSION = "1.0.0"

__version__ = BASE_VERSION
VERSION = BASE_VERSION
