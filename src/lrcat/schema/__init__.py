"""
Query plans for each entity type, keyed by catalog schema generation
"""
from lrcat.schema.base import LoadResult, Query, RowDiagnostic, RowMapper, decode_text, load_objects

__all__ = ["LoadResult", "Query", "RowDiagnostic", "RowMapper", "decode_text", "load_objects"]
