"""Lycans game log statistics package."""

__all__ = [
    "config",
    "data_client",
    "ingest",
    "normalize",
    "camps",
    "timeline",
    "talking",
    "series",
    "features",
    "voting",
    "achievements",
    "validate",
    "report",
    "render",
    "report_pdf",
]
