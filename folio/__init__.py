"""Folio: personal stock portfolio tracker."""

__version__ = "1.0.0"
