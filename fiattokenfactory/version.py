from __future__ import annotations

"""
fiattokenfactory.version: semantic version string.

FTF_VERSION in the environment wins (packaging/CI); otherwise BASE_VERSION.
"""


import os

# Bump this on intentional releases.
BASE_VERSION = "0.1.0"


def build_version() -> str:
    return os.getenv("FTF_VERSION") or BASE_VERSION


__version__ = build_version()


def get_version() -> str:
    return __version__


__all__ = ["__version__", "get_version", "BASE_VERSION"]
