"""
Core, UI-agnostic logic: data models, the highlighter and the pipeline.
"""
