"""
StarBook CLI

Command-line interface for mounts driven by a Vixen StarBook controller.
"""

from starbook import __version__


__all__ = ["__version__"]
