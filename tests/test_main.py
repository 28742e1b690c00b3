"""
Test Suite for the command line entry point
"""
import json
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import main

HEADER = ('id,s_meta_other_platform,s_meta_application_version,d_created_date,'
          's_issue_title,s_messages,a_tags,s_meta_other_os_version,s_meta_other_country_code')


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / 'issues.csv'
    path.write_text('\n'.join([
        HEADER,
        '1,ios,2.0,2024-01-01,App crashes on launch,,[],17.1,US',
        '2,ios,2.1,2024-01-02,Loading forever,,"[""loading""]",17.2,US',
        '3,android,2.0,2024-01-02,App crashes,,[],14,US',
    ]), encoding='utf-8')
    return path


class TestParseArgs:
    def test_defaults(self):
        args = main.parse_args([])
        assert args.input is None
        assert args.serve is False
        assert args.port == 9898
        assert args.config == 'default'

    def test_json_flag_dest(self):
        args = main.parse_args(['--json', 'out.json'])
        assert args.json_path == 'out.json'


class TestMain:
    def test_writes_report_and_document(self, csv_path, tmp_path):
        output = tmp_path / 'report.html'
        json_path = tmp_path / 'analysis.json'

        exit_code = main.main(['--input', str(csv_path), '--output', str(output),
                               '--json', str(json_path)])

        assert exit_code == 0
        assert 'Enhanced iOS Version Analysis' in output.read_text(encoding='utf-8')
        document = json.loads(json_path.read_text(encoding='utf-8'))
        assert document['total_issues'] == 2
        assert sorted(document['version_groups']) == ['2.0', '2.1']
        assert document['tag_patterns']['loading']['count'] == 1

    def test_platform_override(self, csv_path, tmp_path):
        json_path = tmp_path / 'analysis.json'

        exit_code = main.main(['--input', str(csv_path), '--output', str(tmp_path / 'r.html'),
                               '--platform', 'android', '--json', str(json_path)])

        assert exit_code == 0
        assert json.loads(json_path.read_text(encoding='utf-8'))['total_issues'] == 1

    def test_missing_input_returns_error_code(self, tmp_path):
        output = tmp_path / 'report.html'

        exit_code = main.main(['--input', str(tmp_path / 'missing.csv'), '--output', str(output)])

        assert exit_code == 1
        assert not output.exists()
