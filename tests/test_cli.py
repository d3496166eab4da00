"""Tests for the filestats command line interface."""

import json
import os

from click.testing import CliRunner

from conftest import make_tree
from filestats.__version__ import __version__
from filestats.cli.main import cli
from filestats import scanner as scanner_module
from filestats.cli.scan import scan_command


class TestScanCommand:
    """Test `filestats scan`."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_human_readable_output(self, tmp_path):
        make_tree(tmp_path, {'a.bin': 500, 'b/b.bin': 1500, 'c/c.bin': 2500})

        result = self.runner.invoke(scan_command, [str(tmp_path), '--no-export'])

        assert result.exit_code == 0, result.output
        assert 'File Size Statistics' in result.output
        assert 'Files: 3' in result.output
        assert '(3 KB)' in result.output
        assert 'Top 3 sizes by count:' in result.output
        assert 'Report written' not in result.output

    def test_json_output(self, tmp_path):
        make_tree(tmp_path, {'a.bin': 500, 'b/b.bin': 1500, 'c/c.bin': 2500})

        result = self.runner.invoke(scan_command, [str(tmp_path), '--json', '--no-export'])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data['path'] == str(tmp_path)
        assert data['total_files'] == 3
        assert data['total_size_kb'] == 3
        assert data['bucket_count'] == 3
        assert data['directories_scanned'] == 3
        assert data['errors'] == []
        assert data['output_file'] is None
        assert [v['name'] for v in data['views']] == ['Sorted by Size', 'Sorted by Count', 'Sorted by Size%']
        by_count = data['views'][1]
        assert [e['bucket'] for e in by_count['entries']] == [0, 1, 2]

    def test_writes_report_to_output_dir(self, tmp_path, output_dir):
        make_tree(tmp_path, {'a.bin': 2048})

        result = self.runner.invoke(scan_command, [str(tmp_path)])

        assert result.exit_code == 0, result.output
        reports = [f for f in os.listdir(output_dir) if f.startswith('FileStats_') and f.endswith('.xlsx')]
        assert len(reports) == 1
        assert f'Report written to {os.path.join(str(output_dir), reports[0])}' in result.output

    def test_explicit_output(self, tmp_path):
        tree = tmp_path / 'tree'
        make_tree(tree, {'a.bin': 2048})
        target = tmp_path / 'stats.xlsx'

        result = self.runner.invoke(scan_command, [str(tree), '-o', str(target), '--json'])

        assert result.exit_code == 0, result.output
        assert target.exists()
        assert json.loads(result.output)['output_file'] == str(target)

    def test_output_write_error_exits_nonzero(self, tmp_path):
        make_tree(tmp_path, {'a.bin': 2048})
        target = tmp_path / 'no-such-dir' / 'stats.xlsx'

        result = self.runner.invoke(scan_command, [str(tmp_path), '-o', str(target)])

        assert result.exit_code == 1
        assert 'could not write' in result.output
        assert 'Files: 1' in result.output

    def test_empty_directory(self, tmp_path):
        result = self.runner.invoke(scan_command, [str(tmp_path), '--json', '--no-export'])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data['total_files'] == 0
        assert data['total_size_kb'] == 0
        assert all(v['rows'] == [] for v in data['views'])

    def test_missing_path(self, tmp_path):
        result = self.runner.invoke(scan_command, [str(tmp_path / 'missing'), '--no-export'])
        assert result.exit_code == 2
        assert 'Path not found' in result.output

    def test_prompts_for_path(self, tmp_path):
        make_tree(tmp_path, {'a.bin': 10})

        result = self.runner.invoke(scan_command, ['--no-export'], input=f'{tmp_path}\n')

        assert result.exit_code == 0, result.output
        assert 'Enter the directory path' in result.output
        assert 'Files: 1' in result.output

    def test_max_workers_option(self, tmp_path):
        make_tree(tmp_path, {'a/b.bin': 10})
        result = self.runner.invoke(scan_command, [str(tmp_path), '--max-workers', '2', '--json', '--no-export'])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)['mode'] == 'pooled'

    def test_max_workers_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv('FILESTATS_MAX_WORKERS', '3')
        result = self.runner.invoke(scan_command, [str(tmp_path), '--json', '--no-export'])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)['mode'] == 'pooled'

    def test_negative_max_workers_rejected(self, tmp_path):
        result = self.runner.invoke(scan_command, [str(tmp_path), '--max-workers', '-1'])
        assert result.exit_code == 2

    def test_top_limits_rows(self, tmp_path):
        make_tree(tmp_path, {f'f{i}.bin': i * 1024 for i in range(20)})
        result = self.runner.invoke(scan_command, [str(tmp_path), '--no-export', '--top', '5'])
        assert result.exit_code == 0, result.output
        assert 'Top 5 sizes by count:' in result.output

    def test_metrics_file(self, tmp_path):
        tree = tmp_path / 'tree'
        make_tree(tree, {'a.bin': 10})
        metrics = tmp_path / 'filestats.prom'

        result = self.runner.invoke(scan_command, [str(tree), '--no-export', '--metrics-file', str(metrics)])

        assert result.exit_code == 0, result.output
        content = metrics.read_text()
        assert 'filestats_files_classified_total' in content
        assert 'filestats_scan_duration_seconds' in content


class TestCliGroup:
    """Test the command group and default command."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_version(self):
        result = self.runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self):
        result = self.runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'filestats scan [path]' in result.output

    def test_default_command_is_scan(self, tmp_path):
        make_tree(tmp_path, {'a.bin': 10})
        result = self.runner.invoke(cli, [str(tmp_path), '--no-export'])
        assert result.exit_code == 0, result.output
        assert 'Files: 1' in result.output

    def test_explicit_scan(self, tmp_path):
        result = self.runner.invoke(cli, ['scan', str(tmp_path), '--no-export', '--json'])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)['total_files'] == 0


class TestScanErrors:
    """Test reporting of unreadable directories."""

    def test_unreadable_directory_listed(self, tmp_path, monkeypatch):
        make_tree(tmp_path, {'readable.bin': 2048, 'locked/hidden.bin': 9000})
        bad = str(tmp_path / 'locked')
        real_scandir = os.scandir

        def fake_scandir(path):
            if os.fspath(path) == bad:
                raise PermissionError(13, 'Permission denied', path)
            return real_scandir(path)

        monkeypatch.setattr(scanner_module.os, 'scandir', fake_scandir)
        runner = CliRunner()

        result = runner.invoke(scan_command, [str(tmp_path), '--no-export'])
        assert result.exit_code == 0, result.output
        assert 'Unreadable directories: 1' in result.output
        assert bad in result.output

        result = runner.invoke(scan_command, [str(tmp_path), '--no-export', '--json'])
        data = json.loads(result.output)
        assert data['total_files'] == 1
        assert data['total_size_kb'] == 2
        assert [e['path'] for e in data['errors']] == [bad]
