"""Tests for scan module.

Test Files and Coverage:
========================

| Test File          | Test Classes              | Tested Constructs                 | Tested Functionalities                     |
|--------------------|---------------------------|-----------------------------------|--------------------------------------------|
| test_extractor.py  | ExtractDeclarationsTest   | extract_declarations()            | Prefix, ignore list, comments, quoting     |
| test_registry.py   | ModuleRegistryTest        | ModuleRecord, ModuleRegistry      | First-wins insertion, relative paths       |
| test_walker.py     | FileContextTest           | FileContext, walk()               | Lazy stat, listing order, listing errors  |
|                    | WalkTypingsTest           | walk_typings()                    | First-wins, recovery, fatal root, symlinks |
| test_resolver.py   | ResolveDuplicatesTest     | resolve_duplicates()              | Root order, empty roots, probe failures    |
"""
