from .catalog import Catalog, get_catalog, load_catalog
from .matcher import match
from .pipeline import categorize, dedupe, extract_lab_tests
from .types import CatalogEntry, Category, ExtractedTest, ExtractionResult

__all__ = [
    "Catalog",
    "CatalogEntry",
    "Category",
    "ExtractedTest",
    "ExtractionResult",
    "categorize",
    "dedupe",
    "extract_lab_tests",
    "get_catalog",
    "load_catalog",
    "match",
]
