"""Shared test utilities for dtsdup tests."""
from pathlib import Path


def write_declaration(path: Path, *module_ids: str, quote: str = '"') -> Path:
    """Write a declaration file declaring each module id on its own line."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [f'declare module {quote}{module_id}{quote} {{\n    export const value: number;\n}}'
             for module_id in module_ids]
    path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
    return path


def write_external(search_root: Path, relative_path: str) -> Path:
    """Create a compiled declaration file under <search_root>/win_b64/typings."""
    path = search_root / 'win_b64' / 'typings' / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text('export {};\n', encoding='utf-8')
    return path
