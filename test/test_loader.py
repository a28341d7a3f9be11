"""Tests for the schema loader."""

import json
import os
import sys
import tempfile
import unittest
from unittest.mock import MagicMock, patch

import requests

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsonsdraft.loader import LoadError, SchemaLoader, to_url


class TestToUrl(unittest.TestCase):
    """Test turning paths into URLs."""

    def test_urls_unchanged(self):
        for url in ('http://a.com/s.json', 'https://a.com/s.json', 'file:///tmp/s.json'):
            self.assertEqual(to_url(url), url)

    def test_path(self):
        url = to_url(os.path.join('some', 'schema.json'))
        self.assertTrue(url.startswith('file:///'))
        self.assertTrue(url.endswith('/some/schema.json'))


class TestFileLoading(unittest.TestCase):
    """Test loading local files."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.schema_path = os.path.join(self.temp_dir, 'schema.json')
        with open(self.schema_path, 'w', encoding='utf-8') as f:
            json.dump({'$id': 'http://e.com/s.json', 'type': 'object'}, f)

    def tearDown(self):
        if os.path.exists(self.schema_path):
            os.remove(self.schema_path)
        os.rmdir(self.temp_dir)

    def test_load_file_url(self):
        loader = SchemaLoader()
        doc = loader.load(to_url(self.schema_path))
        self.assertEqual(doc['$id'], 'http://e.com/s.json')

    def test_content_cached(self):
        loader = SchemaLoader()
        url = to_url(self.schema_path)
        first = loader.load(url)
        os.remove(self.schema_path)
        self.assertEqual(loader.load(url), first)
        self.assertEqual(loader.load(url + '#/type'), first)

    def test_missing_file(self):
        with self.assertRaises(LoadError) as ctx:
            SchemaLoader().load(to_url(os.path.join(self.temp_dir, 'missing.json')))
        self.assertIsInstance(ctx.exception.__cause__, OSError)

    def test_invalid_json(self):
        with open(self.schema_path, 'w', encoding='utf-8') as f:
            f.write('{"type": ')
        with self.assertRaises(LoadError) as ctx:
            SchemaLoader().load(to_url(self.schema_path))
        self.assertIsInstance(ctx.exception.__cause__, json.JSONDecodeError)

    def test_unsupported_scheme(self):
        with self.assertRaises(LoadError):
            SchemaLoader().load('ftp://example.com/schema.json')


class TestHttpLoading(unittest.TestCase):
    """Test loading remote documents."""

    @patch('jsonsdraft.loader.requests.get')
    def test_load_http(self, mock_get):
        response = MagicMock()
        response.text = '{"$id": "http://e.com/remote.json"}'
        mock_get.return_value = response
        loader = SchemaLoader(timeout=5)
        doc = loader.load('http://e.com/remote.json#frag')
        self.assertEqual(doc, {'$id': 'http://e.com/remote.json'})
        mock_get.assert_called_once_with('http://e.com/remote.json', timeout=5)
        response.raise_for_status.assert_called_once()

        loader.load('http://e.com/remote.json')
        mock_get.assert_called_once()

    @patch('jsonsdraft.loader.requests.get')
    def test_http_error(self, mock_get):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError('404 Client Error')
        mock_get.return_value = response
        with self.assertRaises(LoadError) as ctx:
            SchemaLoader().load('https://e.com/missing.json')
        self.assertEqual(ctx.exception.url, 'https://e.com/missing.json')
        self.assertIn('404', str(ctx.exception))

    @patch('jsonsdraft.loader.requests.get', side_effect=requests.ConnectionError('no route'))
    def test_connection_error(self, mock_get):
        with self.assertRaises(LoadError):
            SchemaLoader().load('https://e.com/schema.json')


if __name__ == '__main__':
    unittest.main()
