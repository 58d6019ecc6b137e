"""Parsing helpers for provider responses."""

from src.parsing.json_extract import JsonExtractionError, extract_json_object

__all__ = ["JsonExtractionError", "extract_json_object"]
