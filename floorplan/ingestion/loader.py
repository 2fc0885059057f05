"""
Document Loader - Acquires a pixel buffer from image files and PDF documents
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union
from dataclasses import dataclass, field
from enum import Enum
import asyncio
import io
import logging

import numpy as np

from ..errors import SourceLoadError, UnsupportedFormatError

logger = logging.getLogger(__name__)


class InputFormat(Enum):
    PDF = "pdf"
    PNG = "png"
    JPG = "jpg"
    JPEG = "jpeg"
    BMP = "bmp"
    TIFF = "tiff"
    WEBP = "webp"
    UNKNOWN = "unknown"


IMAGE_FORMATS = (
    InputFormat.PNG,
    InputFormat.JPG,
    InputFormat.JPEG,
    InputFormat.BMP,
    InputFormat.TIFF,
    InputFormat.WEBP,
)

CONTENT_TYPES = {
    "application/pdf": InputFormat.PDF,
    "image/png": InputFormat.PNG,
    "image/jpeg": InputFormat.JPEG,
    "image/jpg": InputFormat.JPG,
    "image/bmp": InputFormat.BMP,
    "image/tiff": InputFormat.TIFF,
    "image/webp": InputFormat.WEBP,
}


@dataclass
class LoadedDocument:
    """Container for an acquired floor plan"""
    source: str
    format: InputFormat
    image: np.ndarray  # H x W x 3, uint8 RGB
    text: str = ""  # Plain text of the first pages (documents only)
    metadata: dict = field(default_factory=dict)

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]


class DocumentRenderer(ABC):
    """Turns raw file bytes into an RGB pixel buffer"""

    @property
    @abstractmethod
    def name(self) -> str:
        """Renderer name"""
        pass

    @abstractmethod
    def render(self, data: bytes) -> np.ndarray:
        """Decode or rasterize the first page into an H x W x 3 uint8 array"""
        pass

    def extract_text(self, data: bytes, max_pages: int) -> str:
        """Plain text of the first pages; raster formats carry none"""
        return ""


class ImageDecoder(DocumentRenderer):
    """Raster images via Pillow"""

    @property
    def name(self) -> str:
        return "pillow"

    def render(self, data: bytes) -> np.ndarray:
        from PIL import Image

        with Image.open(io.BytesIO(data)) as image:
            return np.array(image.convert("RGB"))


class PdfRenderer(DocumentRenderer):
    """
    First page of a PDF via PyMuPDF.

    The page is rasterized at a fixed zoom; text of the first few pages is
    extracted separately for metadata heuristics.
    """

    def __init__(self, scale: float = 2.0):
        self.scale = scale

    @property
    def name(self) -> str:
        return "pymupdf"

    def render(self, data: bytes) -> np.ndarray:
        import fitz

        with fitz.open(stream=data, filetype="pdf") as doc:
            if doc.page_count == 0:
                raise SourceLoadError("PDF has no pages")
            page = doc[0]
            pix = page.get_pixmap(matrix=fitz.Matrix(self.scale, self.scale), alpha=False)

            img = np.frombuffer(pix.samples, dtype=np.uint8)
            img = img.reshape(pix.height, pix.width, pix.n)
            return img[:, :, :3].copy()

    def extract_text(self, data: bytes, max_pages: int) -> str:
        import fitz

        with fitz.open(stream=data, filetype="pdf") as doc:
            pages = min(doc.page_count, max_pages)
            return "\n".join(doc[i].get_text() for i in range(pages))


def default_renderers(pdf_scale: float = 2.0) -> Dict[InputFormat, DocumentRenderer]:
    """Renderer registry used when none is injected"""
    decoder = ImageDecoder()
    renderers: Dict[InputFormat, DocumentRenderer] = {fmt: decoder for fmt in IMAGE_FORMATS}
    renderers[InputFormat.PDF] = PdfRenderer(scale=pdf_scale)
    return renderers


class DocumentLoader:
    """
    Unified loader for all supported input formats.

    Renderers are resolved per input format from the registry given at
    construction, so tests and callers can substitute their own.

    Supported formats:
    - PDF: first page rendered with PyMuPDF, text from the first pages
    - Images: PNG, JPG, BMP, TIFF, WEBP via Pillow
    """

    SUPPORTED_EXTENSIONS = {'.pdf', '.png', '.jpg', '.jpeg', '.bmp', '.tif', '.tiff', '.webp'}

    def __init__(
        self,
        renderers: Optional[Dict[InputFormat, DocumentRenderer]] = None,
        pdf_scale: float = 2.0,
        text_pages: int = 3,
    ):
        self.renderers = renderers if renderers is not None else default_renderers(pdf_scale)
        self.text_pages = text_pages

    def detect_format(self, filename: str, content_type: Optional[str] = None) -> InputFormat:
        """Detect file format from extension, falling back to the MIME type"""
        ext = Path(filename).suffix.lower().lstrip('.')
        if ext == 'tif':
            return InputFormat.TIFF
        try:
            return InputFormat(ext)
        except ValueError:
            pass
        if content_type:
            return CONTENT_TYPES.get(content_type.lower(), InputFormat.UNKNOWN)
        return InputFormat.UNKNOWN

    def resolve_renderer(self, format_type: InputFormat) -> DocumentRenderer:
        renderer = self.renderers.get(format_type)
        if renderer is None:
            raise UnsupportedFormatError(f"Unsupported file format: {format_type.value}")
        return renderer

    async def load(
        self,
        source: Union[str, Path],
        data: Optional[bytes] = None,
        content_type: Optional[str] = None,
    ) -> LoadedDocument:
        """
        Load a floor plan.

        Args:
            source: File path, or the original filename when data is given
            data: Raw file content (uploads); read from source when omitted
            content_type: Optional MIME type used when the name has no extension

        Returns:
            LoadedDocument with an RGB pixel buffer
        """
        name = str(source)
        format_type = self.detect_format(name, content_type)
        renderer = self.resolve_renderer(format_type)

        if data is None:
            path = Path(source)
            if not path.exists():
                raise SourceLoadError(f"File not found: {path}")
            data = await asyncio.to_thread(path.read_bytes)

        logger.info(f"Loading {format_type.value} via {renderer.name}: {name}")
        try:
            image = await asyncio.to_thread(renderer.render, data)
        except SourceLoadError:
            raise
        except Exception as e:
            raise SourceLoadError(f"Could not load {name}: {e}") from e

        if image is None or image.ndim != 3 or image.size == 0:
            raise SourceLoadError(f"Could not load {name}: empty image")

        text = ""
        if format_type == InputFormat.PDF:
            try:
                text = await asyncio.to_thread(renderer.extract_text, data, self.text_pages)
            except Exception as e:
                logger.warning(f"Text extraction failed for {name}: {e}")

        return LoadedDocument(
            source=name,
            format=format_type,
            image=image,
            text=text,
            metadata={"renderer": renderer.name},
        )
