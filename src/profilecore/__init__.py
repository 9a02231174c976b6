"""
ProfileCore: shell integration for the profilecore toolkit.

Hooks the profilecore binary into bash, zsh, fish and PowerShell
start-up files. Install once, uninstall cleanly, re-run safely.
"""

__version__ = "1.0.0"
__author__ = "ProfileCore"

BINARY_NAME = "profilecore"

CONFIG_DIR_ENV = "PROFILECORE_CONFIG_DIR"
