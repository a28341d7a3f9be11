"""Tests for the package-level lazy exports."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

import jsonsdraft
from jsonsdraft import _version


class TestLazyExports(unittest.TestCase):
    """Test names exposed on the package."""

    def test_functions(self):
        draft = jsonsdraft.get_draft(7)
        self.assertIs(jsonsdraft.latest(), jsonsdraft.get_draft(2020))
        resources = jsonsdraft.collect_resources(draft, {'$id': 'http://e.com/a'}, 'http://e.com/')
        self.assertEqual(resources, {'': jsonsdraft.Resource('http://e.com/a')})
        self.assertTrue(jsonsdraft.has_anchor(draft, {'$id': '#a'}, 'a'))

    def test_submodules(self):
        self.assertEqual(jsonsdraft.urlutil.split('a#b'), ('a', 'b'))

    def test_dunder_names(self):
        self.assertFalse(hasattr(jsonsdraft, '__wrapped__'))


class TestVersion(unittest.TestCase):
    """Test that the package version has a single source."""

    def test_version_read_from_module(self):
        with open(os.path.join(project_root, 'pyproject.toml'), 'r', encoding='utf-8') as f:
            pyproject = f.read()
        self.assertIn('dynamic = ["version"]', pyproject)
        self.assertIn('version = {attr = "jsonsdraft._version.version"}', pyproject)
        self.assertNotRegex(pyproject, r'(?m)^version = "')
        self.assertRegex(_version.version, r'^\d+\.\d+\.\d+')


if __name__ == '__main__':
    unittest.main()
