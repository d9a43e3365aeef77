import asyncio
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from dtsdup.errors import ProbeError
from dtsdup.scan.registry import ModuleRegistry
from dtsdup.scan.resolver import external_declaration_path, resolve_duplicates, split_search_roots
from dtsdup.scan.walker import walk_typings
from dtsdup.utils import processor as processor_module
from dtsdup.utils.processor import Processor

from ..helpers import write_declaration, write_external


def make_registry(*module_ids: str) -> ModuleRegistry:
    registry = ModuleRegistry()
    for module_id in module_ids:
        registry.add(module_id, Path('typings') / 'index.d.ts')
    return registry


class SplitSearchRootsTest(unittest.TestCase):

    def test_split(self):
        self.assertEqual(['C:/a', 'D:/b'], split_search_roots('C:/a;D:/b'))

    def test_empty_segments_are_kept(self):
        self.assertEqual(['/a', ''], split_search_roots('/a;'))


class ResolveDuplicatesTest(unittest.TestCase):

    def _resolve(self, registry, roots, errors=None):
        with Processor(2) as processor:
            return asyncio.run(resolve_duplicates(registry, roots, processor, errors))

    def test_external_declaration_path(self):
        registry = make_registry('DS/Foo/Bar')
        self.assertEqual(Path('/preq/win_b64/typings/Foo/Bar.d.ts'),
                         external_declaration_path('/preq', registry.get('DS/Foo/Bar')))

    def test_no_match(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            registry = make_registry('DS/Foo/Bar')

            duplicates = self._resolve(registry, [tmpdir])

            self.assertEqual([], duplicates)
            self.assertFalse(registry.get('DS/Foo/Bar').exists_externally)
            self.assertIsNone(registry.get('DS/Foo/Bar').external_path)

    def test_match_marks_record(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            external = write_external(Path(tmpdir), 'Foo/Bar.d.ts')
            registry = make_registry('DS/Foo/Bar', 'DS/Foo/Other')

            duplicates = self._resolve(registry, [tmpdir])

            self.assertEqual(['DS/Foo/Bar'], [record.id for record in duplicates])
            self.assertTrue(duplicates[0].exists_externally)
            self.assertEqual(external, duplicates[0].external_path)

    def test_first_matching_root_wins(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            first = Path(tmpdir) / 'first'
            second = Path(tmpdir) / 'second'
            empty = Path(tmpdir) / 'empty'
            empty.mkdir()
            write_external(first, 'Foo.d.ts')
            write_external(second, 'Foo.d.ts')
            registry = make_registry('DS/Foo')

            duplicates = self._resolve(registry, [str(empty), str(second), str(first)])

            self.assertEqual(second / 'win_b64' / 'typings' / 'Foo.d.ts', duplicates[0].external_path)

    def test_results_follow_registry_order(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            for name in ('A', 'B', 'C', 'D'):
                write_external(Path(tmpdir), f'{name}.d.ts')
            registry = make_registry('DS/D', 'DS/B', 'DS/X', 'DS/A', 'DS/C')

            duplicates = self._resolve(registry, [tmpdir])

            self.assertEqual(['DS/D', 'DS/B', 'DS/A', 'DS/C'], [record.id for record in duplicates])

    def test_empty_root_probes_working_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            write_external(Path(tmpdir), 'Foo/Bar.d.ts')
            registry = make_registry('DS/Foo/Bar')

            cwd = os.getcwd()
            os.chdir(tmpdir)
            try:
                duplicates = self._resolve(registry, [str(Path(tmpdir) / 'nowhere'), ''])
            finally:
                os.chdir(cwd)

            self.assertEqual(['DS/Foo/Bar'], [record.id for record in duplicates])
            self.assertEqual(Path('win_b64/typings/Foo/Bar.d.ts'), duplicates[0].external_path)

    def test_probe_failure_is_treated_as_missing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            write_external(Path(tmpdir), 'Foo.d.ts')
            registry = make_registry('DS/Foo')
            errors = []

            def deny(path):
                raise PermissionError(13, 'Permission denied', str(path))

            with mock.patch.object(processor_module, 'probe_path', deny):
                duplicates = self._resolve(registry, [tmpdir], errors)

            self.assertEqual([], duplicates)
            self.assertEqual(1, len(errors))
            self.assertIsInstance(errors[0], ProbeError)

    def test_probe_failure_falls_through_to_next_root(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            denied = Path(tmpdir) / 'denied'
            allowed = Path(tmpdir) / 'allowed'
            write_external(allowed, 'Foo.d.ts')
            registry = make_registry('DS/Foo')
            original_probe = processor_module.probe_path

            def probe(path):
                if denied in path.parents:
                    raise PermissionError(13, 'Permission denied', str(path))
                return original_probe(path)

            with mock.patch.object(processor_module, 'probe_path', probe):
                duplicates = self._resolve(registry, [str(denied), str(allowed)])

            self.assertEqual(allowed / 'win_b64' / 'typings' / 'Foo.d.ts', duplicates[0].external_path)

    def test_unrepresentable_path_is_treated_as_missing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write_declaration(root / 'typings' / 'A.d.ts', 'DS/Foo\x00Bar', 'DS/Ok')
            write_external(root / 'preq', 'Ok.d.ts')
            errors = []

            with Processor(2) as processor:
                registry = asyncio.run(walk_typings(root / 'typings', processor))
                duplicates = asyncio.run(resolve_duplicates(registry, [str(root / 'preq')], processor, errors))

            self.assertEqual(['DS/Foo\x00Bar', 'DS/Ok'], [record.id for record in registry])
            self.assertEqual(['DS/Ok'], [record.id for record in duplicates])
            self.assertEqual(1, len(errors))
            self.assertIsInstance(errors[0], ProbeError)
            self.assertIsInstance(errors[0].cause, ValueError)

    def test_empty_registry(self):
        self.assertEqual([], self._resolve(ModuleRegistry(), ['/nowhere']))
