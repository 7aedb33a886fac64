"""File discovery, selection and ordering package."""

from .discovery import (
    EXCLUDED_DIR_NAMES,
    is_excluded_path,
    iter_candidate_files,
    select_files,
    walk,
)
from .languages import ALL_LANGUAGES, LANGUAGE_EXTENSIONS, resolve_extensions, supported_languages
from .models import CandidateFile
from .ordering import SORT_BY_NAME, SORT_BY_TYPE, SORT_KEYS, order_files

__all__ = [
    "ALL_LANGUAGES",
    "CandidateFile",
    "EXCLUDED_DIR_NAMES",
    "LANGUAGE_EXTENSIONS",
    "SORT_BY_NAME",
    "SORT_BY_TYPE",
    "SORT_KEYS",
    "is_excluded_path",
    "iter_candidate_files",
    "order_files",
    "resolve_extensions",
    "select_files",
    "supported_languages",
    "walk",
]
