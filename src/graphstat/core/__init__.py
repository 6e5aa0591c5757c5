"""Graph analysis core: ingestion, adjacency, traversal and statistics.

Modules in this package must NOT import from cli/ - they are pure logic.
"""
