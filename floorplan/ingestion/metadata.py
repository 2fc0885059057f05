"""
Plan metadata extraction from document text

Technical passports usually print the total area, the ceiling height and the
address as plain text next to the drawing. Patterns are tried in order and the
first match wins per field; a missing match leaves the field as None.
"""
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple
import logging
import re

from ..errors import MetadataExtractionError

logger = logging.getLogger(__name__)

_NUMBER = r"(\d+[.,]\d+|\d+)"

AREA_PATTERNS: List[Pattern] = [
    re.compile(r"площадь[:\s]+" + _NUMBER + r"\s*(?:кв\.?\s*)?м[²2]?", re.IGNORECASE),
    re.compile(r"общая\s+площадь[:\s]+" + _NUMBER, re.IGNORECASE),
    re.compile(_NUMBER + r"\s*м[²2]\s*общая", re.IGNORECASE),
    re.compile(r"S\s*общ[ая]*[:\s]+" + _NUMBER, re.IGNORECASE),
    re.compile(r"(?:total\s+)?area[:\s]+" + _NUMBER + r"\s*(?:sq\.?\s*)?m", re.IGNORECASE),
]

ADDRESS_PATTERNS: List[Pattern] = [
    re.compile(r"г\.?\s*[А-ЯЁ][а-яё]+[,\s]+(?:ул\.?|улица|пр\.?|проспект)[ А-ЯЁа-яё\d.,]+", re.IGNORECASE),
    re.compile(r"Москва[, ]+[ А-ЯЁа-яё\d.,]+", re.IGNORECASE),
    re.compile(r"Санкт-Петербург[, ]+[ А-ЯЁа-яё\d.,]+", re.IGNORECASE),
    re.compile(r"address[:\s]+([^\n]+)", re.IGNORECASE),
]

HEIGHT_PATTERNS: List[Pattern] = [
    re.compile(r"высота[:\s]+" + _NUMBER + r"\s*м", re.IGNORECASE),
    re.compile(r"потол\w*[:\s]+" + _NUMBER + r"\s*м", re.IGNORECASE),
    re.compile(r"ceiling\s+height[:\s]+" + _NUMBER + r"\s*m", re.IGNORECASE),
    re.compile(r"\bH[:\s]+" + _NUMBER + r"\s*[мm]\b"),
]

MIN_ADDRESS_LENGTH = 11

# Plausible (low, high) bounds; a matched value outside them is a misread
AREA_RANGE = (1.0, 100000.0)  # square meters
HEIGHT_RANGE = (1.5, 10.0)  # meters


@dataclass
class PlanMetadata:
    """Metadata found in the document text"""
    area: Optional[float] = None  # square meters
    ceiling_height: Optional[float] = None  # meters
    address: Optional[str] = None
    scale: Optional[float] = None  # meters per pixel, when the caller knows it


def _parse_number(value: str, bounds: Tuple[float, float]) -> float:
    number = float(value.replace(",", "."))
    low, high = bounds
    if not low <= number <= high:
        raise MetadataExtractionError(f"{value!r} is outside [{low:g}, {high:g}]")
    return number


def _first_number(patterns: List[Pattern], text: str, bounds: Tuple[float, float]) -> Optional[float]:
    """Value of the first matching pattern; out-of-range values raise"""
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return _parse_number(match.group(1), bounds)
    return None


def _first_address(text: str) -> Optional[str]:
    for pattern in ADDRESS_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        address = (match.group(1) if match.groups() else match.group(0)).strip()
        if len(address) >= MIN_ADDRESS_LENGTH:
            return address
    return None


def extract_metadata(text: Optional[str]) -> PlanMetadata:
    """
    Extract area, ceiling height and address from document text.

    Failures in one field never affect the others; the caller gets whatever
    could be parsed.
    """
    metadata = PlanMetadata()
    if not text:
        return metadata

    for field_name, extractor in (
        ("area", lambda: _first_number(AREA_PATTERNS, text, AREA_RANGE)),
        ("ceiling_height", lambda: _first_number(HEIGHT_PATTERNS, text, HEIGHT_RANGE)),
        ("address", lambda: _first_address(text)),
    ):
        try:
            setattr(metadata, field_name, extractor())
        except MetadataExtractionError as e:
            logger.warning(f"Could not extract {field_name}: {e}")

    logger.info(f"Extracted metadata: {metadata}")
    return metadata
