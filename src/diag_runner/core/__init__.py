"""Orchestration engine: solution loading, compilation, analysis, reporting."""
