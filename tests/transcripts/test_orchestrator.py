#!/usr/bin/env python3
"""
Tests for batch import over files and directories
"""
import unittest
import sys
import os
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from database.manager import TranscriptDatabase, UnitOfWork
from database.models import BillReference, CommitteeAlias, Transcript
from importers.orchestrator import (
    ErrorPolicy, ImportOrchestrator, expand_input_path, find_transcripts
)
from utils.exceptions import DocumentParseError, PersistenceError

SHARED_REFERENCES = '''<hearings>
    <transcript id="T1">
        <title>First</title>
        <bills><bill id="HB100"/></bills>
        <committees><committee>Senate Appropriations</committee></committees>
    </transcript>
    <transcript id="T2">
        <title>Second</title>
        <bills><bill id="HB100"/></bills>
        <committees><committee>Senate Appropriations</committee></committees>
    </transcript>
</hearings>
'''

THREE_TRANSCRIPTS = '''<hearings>
    <transcript id="T1"><bills><bill id="HB1"/></bills></transcript>
    <transcript id="T2"><bills><bill id="HB2"/></bills></transcript>
    <transcript id="T3"><bills><bill id="HB3"/></bills></transcript>
</hearings>
'''


class TestFindTranscripts(unittest.TestCase):
    """Test transcript element discovery"""

    def test_finds_nested_transcripts_in_document_order(self):
        root = ET.fromstring(
            '<root><session><transcript id="A"/></session>'
            '<transcript id="B"/><other><deeper><transcript id="C"/></deeper></other></root>'
        )
        found = [element.get('id') for element in find_transcripts(root, 'transcript')]
        self.assertEqual(found, ['A', 'B', 'C'])

    def test_does_not_descend_into_transcripts(self):
        root = ET.fromstring('<root><transcript id="outer"><transcript id="inner"/></transcript></root>')
        found = [element.get('id') for element in find_transcripts(root, 'transcript')]
        self.assertEqual(found, ['outer'])

    def test_root_can_be_a_transcript(self):
        root = ET.fromstring('<transcript id="only"/>')
        self.assertEqual([e.get('id') for e in find_transcripts(root, 'transcript')], ['only'])

    def test_custom_tag(self):
        root = ET.fromstring('<root><hearing id="H1"/><transcript id="T1"/></root>')
        self.assertEqual([e.get('id') for e in find_transcripts(root, 'hearing')], ['H1'])


class TestExpandInputPath(unittest.TestCase):

    def test_directory_files_sorted_without_recursion(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            base = Path(tmpdir)
            for name in ('b.xml', 'a.xml', 'c.txt'):
                (base / name).write_text('<root/>')
            (base / 'nested').mkdir()
            (base / 'nested' / 'd.xml').write_text('<root/>')

            names = [p.name for p in expand_input_path(base)]

        self.assertEqual(names, ['a.xml', 'b.xml', 'c.txt'])

    def test_single_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / 'one.xml'
            path.write_text('<root/>')
            self.assertEqual(expand_input_path(str(path)), [path])


class OrchestratorTestCase(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.base = Path(self.tmpdir.name)
        self.database = TranscriptDatabase('sqlite://')
        self.database.initialize_schema()

    def tearDown(self):
        self.database.dispose()
        self.tmpdir.cleanup()

    def write(self, name, content):
        path = self.base / name
        path.write_text(content)
        return path

    def transcript_ids(self):
        with self.database.session_scope() as session:
            return sorted(t.transcript_id for t in session.query(Transcript).all())


class TestImportOrchestrator(OrchestratorTestCase):
    """Test end-to-end runs against an in-memory database"""

    def test_shared_bill_and_committee_are_created_once(self):
        path = self.write('hearings.xml', SHARED_REFERENCES)
        result = ImportOrchestrator(self.database).run(path)

        self.assertTrue(result.success)
        self.assertEqual(result.imported, 2)
        self.assertEqual(self.transcript_ids(), ['T1', 'T2'])

        with self.database.session_scope() as session:
            self.assertEqual(session.query(BillReference).count(), 1)
            aliases = session.query(CommitteeAlias).all()
            self.assertEqual(len(aliases), 1)
            self.assertEqual(aliases[0].cty_code, 299)
            self.assertEqual(aliases[0].alternate_name, 'Appropriations')

            bill = session.get(BillReference, 'HB100')
            self.assertEqual(sorted(t.transcript_id for t in bill.transcripts), ['T1', 'T2'])
            self.assertEqual(sorted(t.transcript_id for t in aliases[0].transcripts), ['T1', 'T2'])

    def test_existing_alias_is_used_for_every_transcript(self):
        with self.database.session_scope() as session:
            session.add(CommitteeAlias(cty_code=204, chamber=2, name='Appropriations',
                                       alternate_name='Appropriations'))

        path = self.write('hearings.xml', SHARED_REFERENCES)
        result = ImportOrchestrator(self.database).run(path)

        self.assertTrue(result.success)
        with self.database.session_scope() as session:
            aliases = session.query(CommitteeAlias).all()
            self.assertEqual([a.cty_code for a in aliases], [204])
            self.assertEqual(len(aliases[0].transcripts), 2)

    def test_directory_run_imports_every_file(self):
        self.write('01.xml', '<hearings><transcript id="A1"/></hearings>')
        self.write('02.xml', '<transcript id="A2"/>')

        result = ImportOrchestrator(self.database).run(self.base)

        self.assertTrue(result.success)
        self.assertEqual([Path(d.path).name for d in result.documents], ['01.xml', '02.xml'])
        self.assertEqual(self.transcript_ids(), ['A1', 'A2'])

    def test_document_without_transcripts_succeeds(self):
        path = self.write('empty.xml', '<hearings><note>nothing here</note></hearings>')
        result = ImportOrchestrator(self.database).run(path)

        self.assertTrue(result.success)
        self.assertEqual(result.imported, 0)


class TestErrorPolicy(OrchestratorTestCase):
    """Test what happens to the batch after a failure"""

    def fail_second_commit(self):
        real_commit = UnitOfWork.commit
        calls = []

        def commit(uow):
            calls.append(uow)
            if len(calls) == 2:
                raise OperationalError('COMMIT', {}, Exception('disk I/O error'))
            return real_commit(uow)

        return patch.object(UnitOfWork, 'commit', autospec=True, side_effect=commit)

    def test_failure_stops_document_after_committed_transcripts(self):
        path = self.write('three.xml', THREE_TRANSCRIPTS)

        with self.fail_second_commit():
            result = ImportOrchestrator(self.database).run(path)

        self.assertFalse(result.success)
        self.assertEqual(self.transcript_ids(), ['T1'])
        with self.database.session_scope() as session:
            self.assertEqual([b.bill_id for b in session.query(BillReference).all()], ['HB1'])

        document = result.documents[0]
        self.assertFalse(document.success)
        self.assertEqual(document.imported, 1)
        self.assertIsInstance(document.error, PersistenceError)
        self.assertEqual(document.error.transcript_id, 'T2')

    def test_stop_policy_skips_remaining_files(self):
        self.write('01.xml', THREE_TRANSCRIPTS)
        self.write('02.xml', '<transcript id="LATER"/>')

        with self.fail_second_commit():
            result = ImportOrchestrator(self.database, error_policy=ErrorPolicy.STOP).run(self.base)

        self.assertTrue(result.stopped_early)
        self.assertEqual(len(result.documents), 1)
        self.assertEqual(self.transcript_ids(), ['T1'])

    def test_continue_policy_processes_remaining_files(self):
        self.write('01.xml', THREE_TRANSCRIPTS)
        self.write('02.xml', '<transcript id="LATER"/>')

        with self.fail_second_commit():
            result = ImportOrchestrator(self.database, error_policy=ErrorPolicy.CONTINUE).run(self.base)

        self.assertFalse(result.stopped_early)
        self.assertFalse(result.success)
        self.assertEqual(len(result.documents), 2)
        self.assertEqual(len(result.failed), 1)
        self.assertEqual(result.imported, 2)
        self.assertEqual(self.transcript_ids(), ['LATER', 'T1'])

    def test_malformed_document_is_parse_failure(self):
        self.write('01.xml', '<hearings><transcript id="X">')
        self.write('02.xml', '<transcript id="OK"/>')

        with self.assertLogs('importers.orchestrator', level='CRITICAL'):
            result = ImportOrchestrator(self.database).run(self.base)

        self.assertTrue(result.stopped_early)
        self.assertIsInstance(result.documents[0].error, DocumentParseError)
        self.assertEqual(self.transcript_ids(), [])

    def test_malformed_document_with_continue(self):
        self.write('01.xml', 'not xml at all')
        self.write('02.xml', '<transcript id="OK"/>')

        result = ImportOrchestrator(self.database, error_policy=ErrorPolicy.CONTINUE).run(self.base)

        self.assertEqual(self.transcript_ids(), ['OK'])
        self.assertEqual(result.to_dict()['failed'], 1)


if __name__ == '__main__':
    unittest.main()
