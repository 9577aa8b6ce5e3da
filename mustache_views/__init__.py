"""Mustache view resolution for FastAPI applications."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mustache-views")
except PackageNotFoundError:
    __version__ = "dev"
