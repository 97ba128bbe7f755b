"""Class roster spreadsheet ingestion for the school co-curricular records manager."""

__version__ = "0.1.0"
