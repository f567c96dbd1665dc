"""Errors raised outside the overlay core. The core itself degrades silently."""

from __future__ import annotations


class DefectViewError(Exception):
    """Base class for defectview errors."""


class PayloadError(DefectViewError):
    """Annotation payload root is not usable (neither a list nor a mapping)."""


class SourceError(DefectViewError):
    """Image or annotation payload could not be fetched, read or decoded."""
