# Ingestion module
# Acquires and prepares floor plan pixel buffers:
# - Images (PNG, JPG, BMP, TIFF, WEBP)
# - PDF (first page rendered, text of the first pages for metadata)

from .loader import DocumentLoader, DocumentRenderer, InputFormat, LoadedDocument
from .preprocessor import ImagePreprocessor, PreprocessingConfig
from .metadata import PlanMetadata, extract_metadata

__all__ = [
    "DocumentLoader",
    "DocumentRenderer",
    "InputFormat",
    "LoadedDocument",
    "ImagePreprocessor",
    "PreprocessingConfig",
    "PlanMetadata",
    "extract_metadata",
]
