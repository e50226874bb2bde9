"""Formatting helpers shared by the CLI and the report service."""

from .convert_utils import ConvertUtils

__all__ = ["ConvertUtils"]
