"""Application commands."""

from .analyze_document import AnalyzeDocumentCommand, AnalyzeDocumentHandler

__all__ = ["AnalyzeDocumentCommand", "AnalyzeDocumentHandler"]
