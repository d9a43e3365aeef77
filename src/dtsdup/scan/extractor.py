"""Extraction of custom module identifiers from ambient declaration files.

Only the ``declare module "<id>"`` form is recognised, line by line, with regular
expressions. There is no comment state across lines: a line is considered commented
out when a comment marker (``//``, ``/*`` or ``*``) precedes ``declare module`` on that
same line.
"""
import re
from pathlib import Path

MODULE_ID_PREFIX = 'DS/'

IGNORED_NAMESPACES = (
    'DS/DSTypings',
    'DS/TypingsTempModules',
    'DS/RDFSharedTypings',
)

_LINE_SEPARATOR = re.compile(r'\r?\n')
_MODULE_ID = re.compile(r'''module (["'])(.*?[^\\])\1''')
_COMMENTED_DECLARATION = re.compile(r'(//|/\*|\*)(.*?declare module)')
_IGNORED_MODULE = re.compile('|'.join(re.escape(namespace) for namespace in IGNORED_NAMESPACES))


def is_custom_module_id(module_id: str) -> bool:
    """Whether a declared identifier belongs to the checked namespace and is not ignored."""
    return module_id.startswith(MODULE_ID_PREFIX) and _IGNORED_MODULE.search(module_id) is None


def extract_declarations(file_text: str, file_path: Path) -> list[tuple[str, Path]]:
    """Extract custom module identifiers declared in a file's text.

    Args:
        file_text: Full text of the declaration file
        file_path: Path reported alongside every identifier

    Returns:
        (identifier, file_path) pairs in line order. An identifier declared twice in the
        same file appears twice; collapsing is left to the registry.
    """
    declarations = []
    for line in _LINE_SEPARATOR.split(file_text):
        if not line.strip() or _COMMENTED_DECLARATION.search(line):
            continue

        match = _MODULE_ID.search(line)
        if match is None:
            continue

        module_id = match.group(2)
        if is_custom_module_id(module_id):
            declarations.append((module_id, file_path))

    return declarations


def extract_declarations_from_file(file_path: Path) -> list[tuple[str, Path]]:
    """Read a declaration file as UTF-8 and extract its identifiers.

    Raises:
        OSError: The file cannot be read
        UnicodeDecodeError: The file is not valid UTF-8
    """
    with open(file_path, 'r', encoding='utf-8', newline='') as f:
        return extract_declarations(f.read(), file_path)
