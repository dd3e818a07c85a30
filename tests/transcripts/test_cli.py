#!/usr/bin/env python3
"""
Tests for the transcript loader command line
"""
import unittest
import sys
import os
import logging
import tempfile
from pathlib import Path

from click.testing import CliRunner

sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from cli import cli
from database.manager import TranscriptDatabase

COMMITTEES_CSV = '''cty_code,chamber,name,alternate_name,start_year,end_year
204,Senate,Appropriations,Appropriations,1979,
112,House,Education,Education,1979,
'''


class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.base = Path(self.tmpdir.name)
        self.db_path = self.base / 'transcripts.db'
        self.datasource = self.write('datasource.properties', f'url=sqlite:///{self.db_path}\n')
        self.runner = CliRunner()

    def tearDown(self):
        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            handler.close()
            root_logger.removeHandler(handler)
        self.tmpdir.cleanup()

    def write(self, name, content):
        path = self.base / name
        path.write_text(content)
        return str(path)

    def invoke(self, *args):
        return self.runner.invoke(cli, ['--log-file', str(self.base / 'logs' / 'cli.log'), *args])

    def count(self, table):
        database = TranscriptDatabase(f'sqlite:///{self.db_path}')
        try:
            return database.get_table_counts()[table]
        finally:
            database.dispose()

    def test_load_file(self):
        document = self.write('hearings.xml',
                              '<hearings><transcript id="T1"><bills><bill id="HB1"/></bills>'
                              '</transcript></hearings>')

        result = self.invoke('load', self.datasource, document)

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('Imported 1 transcripts', result.output)
        self.assertEqual(self.count('transcripts'), 1)
        self.assertTrue((self.base / 'logs' / 'cli.log').exists())

    def test_load_malformed_document_exits_nonzero(self):
        document = self.write('broken.xml', '<hearings><transcript id="T1">')

        result = self.invoke('load', self.datasource, document)

        self.assertEqual(result.exit_code, 1)
        self.assertEqual(self.count('transcripts'), 0)

    def test_continue_still_reports_failure(self):
        documents = self.base / 'docs'
        documents.mkdir()
        (documents / 'a.xml').write_text('broken')
        (documents / 'b.xml').write_text('<transcript id="B1"/>')

        result = self.invoke('load', self.datasource, str(documents), '--on-error', 'continue')

        self.assertEqual(result.exit_code, 1)
        self.assertIn('1 failed', result.output)
        self.assertEqual(self.count('transcripts'), 1)

    def test_custom_transcript_tag(self):
        document = self.write('hearings.xml', '<hearings><hearing id="H1"/></hearings>')

        result = self.invoke('load', self.datasource, document, '--tag', 'hearing')

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.count('transcripts'), 1)

    def test_datasource_without_url_exits_nonzero(self):
        datasource = self.write('bad.properties', 'username=loader\n')
        document = self.write('hearings.xml', '<transcript id="T1"/>')

        result = self.invoke('load', datasource, document)

        self.assertEqual(result.exit_code, 1)
        self.assertFalse(self.db_path.exists())

    def test_seed_committees_and_status(self):
        self.assertEqual(self.invoke('database', 'init', self.datasource).exit_code, 0)

        csv_file = self.write('committees.csv', COMMITTEES_CSV)
        result = self.invoke('database', 'seed-committees', self.datasource, csv_file)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.count('committee_aliases'), 2)

        # Second run finds both rows already present
        result = self.invoke('database', 'seed-committees', self.datasource, csv_file)
        self.assertIn("'existing': 2", result.output)

        result = self.invoke('database', 'status', self.datasource)
        self.assertEqual(result.exit_code, 0)
        self.assertIn('committee_aliases', result.output)

    def test_seed_committees_with_invalid_row_exits_nonzero(self):
        csv_file = self.write('committees.csv', COMMITTEES_CSV + '110,Senate,Education,Education,,\n')

        result = self.invoke('database', 'seed-committees', self.datasource, csv_file)

        self.assertEqual(result.exit_code, 1)
        self.assertEqual(self.count('committee_aliases'), 2)


if __name__ == '__main__':
    unittest.main()
