"""Scanning of typings trees.

This package contains:
- extractor: Line-based extraction of custom module identifiers from declaration text
- registry: ModuleRecord and the first-wins ModuleRegistry
- walker: Concurrent traversal of a typings tree into a ModuleRegistry
- resolver: Probing of external search roots for compiled counterparts
"""
