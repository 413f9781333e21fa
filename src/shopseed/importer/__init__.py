"""
importer - CSV import pipeline.

Public API:
    ImportPipeline(store, settings).run() → ImportReport
"""

from shopseed.importer.pipeline import ImportPipeline, ENTITY_SOURCES   # noqa: F401
from shopseed.importer.report import ImportReport, RunState             # noqa: F401
