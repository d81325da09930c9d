"""Integration tests for the jsonlayout command-line tool"""
import json

import pytest
from click.testing import CliRunner

from jsonlayout import context
from jsonlayout.cli import cli, parse_context_items


@pytest.fixture
def runner():
    """CLI test runner fixture"""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / 'layout.yml'
    path.write_text("""
fields:
  message: '%(message)s'
  category: '%(name)s'
  level: '%(levelname)s'
prefix: '@cee:'
include_context: true
context_field_name: context
max_length_kb: 4
""")
    return path


def json_line(output, prefix=''):
    lines = [l for l in output.splitlines() if l.startswith(prefix + '{')]
    assert len(lines) == 1
    return json.loads(lines[0][len(prefix):])


def test_cli_help(runner):
    """Test CLI displays help"""
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'Size-bounded JSON log layout tools' in result.output


@pytest.mark.integration
def test_check_valid_config(runner, config_file):
    """Test check accepts a valid config"""
    result = runner.invoke(cli, ['check', str(config_file)])

    assert result.exit_code == 0
    assert 'Layout config valid' in result.output
    assert 'Budget: 4096 bytes' in result.output


@pytest.mark.integration
def test_check_unknown_key(runner, tmp_path):
    """Test check rejects unknown configuration keys"""
    path = tmp_path / 'layout.yml'
    path.write_text('name_for_mdc: mdc\n')

    result = runner.invoke(cli, ['check', str(path)])

    assert result.exit_code == 1


@pytest.mark.integration
def test_check_missing_file(runner, tmp_path):
    """Test check fails on a missing file"""
    result = runner.invoke(cli, ['check', str(tmp_path / 'missing.yml')])

    assert result.exit_code == 1


@pytest.mark.integration
def test_encode_with_context(runner, config_file):
    """Test encode prints one line with nested context"""
    result = runner.invoke(cli, [
        'encode', str(config_file), 'User login',
        '--category', 'auth',
        '--level', 'WARNING',
        '--context', 'user_id=123',
        '--context', 'request={id: req-456, retries: [1, 2]}',
    ])

    assert result.exit_code == 0
    assert json_line(result.output, prefix='@cee:') == {
        'message': 'User login',
        'category': 'auth',
        'level': 'WARNING',
        'context': {'user_id': 123, 'request': {'id': 'req-456', 'retries': [1, 2]}},
    }
    assert context.snapshot() == {}


@pytest.mark.integration
def test_encode_without_context(runner, config_file):
    """Test encode omits the context key when none is given"""
    result = runner.invoke(cli, ['encode', str(config_file), 'Application started'])

    assert result.exit_code == 0
    assert 'context' not in json_line(result.output, prefix='@cee:')


@pytest.mark.integration
def test_encode_warns_when_context_disabled(runner, tmp_path):
    """Test encode warns that --context has no effect without include_context"""
    path = tmp_path / 'layout.yml'
    path.write_text("fields:\n  message: '%(message)s'\n")

    result = runner.invoke(cli, ['encode', str(path), 'hello', '--context', 'user_id=123'])

    assert result.exit_code == 0
    assert '--context ignored: include_context is false' in result.output
    assert json_line(result.output) == {'message': 'hello'}


@pytest.mark.integration
def test_encode_no_warning_with_context_enabled(runner, config_file):
    """Test encode stays quiet when context is enabled"""
    result = runner.invoke(cli, ['encode', str(config_file), 'hello', '--context', 'user_id=123'])

    assert result.exit_code == 0
    assert 'ignored' not in result.output


@pytest.mark.integration
def test_encode_bad_context_item(runner, config_file):
    """Test encode rejects context items without '='"""
    result = runner.invoke(cli, ['encode', str(config_file), 'msg', '--context', 'oops'])

    assert result.exit_code == 2


def test_parse_context_items():
    """Test KEY=VALUE parsing with YAML values"""
    assert parse_context_items(['n=42', 'flag=true', 'name=alice', 'empty=', 'expr=a=b']) == {
        'n': 42,
        'flag': True,
        'name': 'alice',
        'empty': '',
        'expr': 'a=b',
    }
