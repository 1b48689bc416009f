"""
Notion Database Migration

A batch tool for copying every page of one Notion database into another
database with a different (but overlapping) property schema.

Supports:
- Full paginated retrieval of the source database
- Schema-driven property re-mapping against the target database
- Batched page creation with per-page failure isolation
- Fixed-delay pacing to stay under the API rate limit
- Dry-run simulation
"""

__version__ = "0.1.0"
