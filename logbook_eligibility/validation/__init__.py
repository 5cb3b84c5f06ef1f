"""Logbook row validation."""

from .validator import RowValidator

__all__ = ["RowValidator"]
