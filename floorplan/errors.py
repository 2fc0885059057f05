"""
Recognition errors

Every failure that aborts a recognition request derives from RecognitionError
so the pipeline boundary can turn it into a failed RecognitionResult.
"""


class RecognitionError(Exception):
    """Base class for recognition failures"""


class UnsupportedFormatError(RecognitionError):
    """Input is neither an image nor a supported document"""


class SourceLoadError(RecognitionError):
    """Decoding or rendering the source file failed"""


class NoLinesDetectedError(RecognitionError):
    """Line extraction produced no segments"""

    def __init__(self, message: str = "No lines could be detected on the plan. Try a sharper image."):
        super().__init__(message)


class MetadataExtractionError(RecognitionError):
    """Text or metadata extraction failed (never fatal)"""
