"""Bundle building interfaces."""

from .engine import build_bundle, strip_empty_lines, write_bundle
from .models import BundleRequest, BundleSummary, SkippedFile

__all__ = [
    "BundleRequest",
    "BundleSummary",
    "SkippedFile",
    "build_bundle",
    "strip_empty_lines",
    "write_bundle",
]
