#!/usr/bin/env python3
"""
Tests for datasource file loading
"""
import unittest
import sys
import os
import tempfile
from pathlib import Path

sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from config.datasource import build_database_url, read_datasource
from utils.exceptions import DataSourceError


class TestDatasource(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.base = Path(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, content):
        path = self.base / 'datasource.properties'
        path.write_text(content)
        return path

    def test_read_valid_file(self):
        datasource = read_datasource(self.write('url=sqlite:///hearings.db\necho=true\n'))
        self.assertEqual(datasource.url, 'sqlite:///hearings.db')
        self.assertTrue(datasource.echo)
        self.assertIsNone(datasource.username)

    def test_credentials_are_applied_to_url(self):
        datasource = read_datasource(self.write(
            'url=postgresql://db.example.org:5432/transcripts\n'
            'username=loader\n'
            'password=s3cret\n'
        ))
        url = build_database_url(datasource)

        self.assertEqual(url.username, 'loader')
        self.assertEqual(url.password, 's3cret')
        self.assertEqual(url.host, 'db.example.org')
        self.assertEqual(url.database, 'transcripts')

    def test_url_credentials_kept_without_overrides(self):
        datasource = read_datasource(self.write('url=postgresql://me:pw@localhost/transcripts\n'))
        url = build_database_url(datasource)
        self.assertEqual((url.username, url.password), ('me', 'pw'))

    def test_missing_file(self):
        with self.assertRaises(DataSourceError):
            read_datasource(self.base / 'absent.properties')

    def test_missing_url(self):
        with self.assertRaises(DataSourceError):
            read_datasource(self.write('username=loader\n'))

    def test_unparseable_url(self):
        with self.assertRaises(DataSourceError):
            read_datasource(self.write('url=not a url\n'))


if __name__ == '__main__':
    unittest.main()
