"""
Unit tests for layout configuration.
"""

import pytest

from jsonlayout.config import LayoutConfig, load_config
from jsonlayout.errors import ConfigError
from jsonlayout.record import Inline, Nested


class TestLayoutConfig:
    """Test LayoutConfig"""

    def test_defaults(self):
        """Should default to a message-only 20KB layout"""
        config = LayoutConfig()

        assert config.fields == {'message': '%(message)s'}
        assert config.prefix == ''
        assert config.include_context is False
        assert config.context_field_name is None
        assert config.canonical is False
        assert config.max_length_kb == 20
        assert config.budget == 20 * 1024

    def test_fractional_budget(self):
        """Should convert kilobytes to bytes"""
        assert LayoutConfig(max_length_kb=0.1).budget == pytest.approx(102.4)

    def test_placement(self):
        """Should nest context only when a context field name is set"""
        assert LayoutConfig().placement == Inline()
        assert LayoutConfig(context_field_name='mdc').placement == Nested('mdc')

    def test_message_moved_first(self):
        """Should put message before other fields"""
        config = LayoutConfig(fields={'category': '%(name)s', 'message': '%(message)s'})

        assert list(config.fields) == ['message', 'category']

    def test_from_dict(self):
        """Should build a config from a mapping"""
        config = LayoutConfig.from_dict({'prefix': '@cee:', 'canonical': True, 'max_length_kb': 3.8})

        assert config.prefix == '@cee:'
        assert config.canonical is True
        assert config.max_length_kb == 3.8

    def test_from_dict_unknown_keys(self):
        """Should reject unknown keys"""
        with pytest.raises(ConfigError, match='Unknown configuration items: bogus, extra'):
            LayoutConfig.from_dict({'extra': 1, 'bogus': 2})

    def test_from_dict_not_mapping(self):
        """Should reject a non-mapping config"""
        with pytest.raises(ConfigError):
            LayoutConfig.from_dict(['prefix'])

    @pytest.mark.parametrize('options', [
        {'fields': {}},
        {'fields': {'message': 42}},
        {'prefix': 5},
        {'include_context': 'yes'},
        {'canonical': 1},
        {'context_field_name': ''},
        {'max_length_kb': 0},
        {'max_length_kb': -1},
        {'max_length_kb': 'big'},
        {'max_length_kb': True},
    ])
    def test_invalid_values(self, options):
        """Should reject invalid option values"""
        with pytest.raises(ConfigError):
            LayoutConfig.from_dict(options)

    def test_frozen(self):
        """Should not allow changes after construction"""
        config = LayoutConfig()

        with pytest.raises(AttributeError):
            config.prefix = 'x'


class TestLoadConfig:
    """Test load_config"""

    def test_load_yaml(self, tmp_path):
        """Should parse a YAML layout config"""
        path = tmp_path / 'layout.yml'
        path.write_text("""
fields:
  message: '%(message)s'
  category: '%(name)s'
prefix: '@cee:'
include_context: true
context_field_name: context
max_length_kb: 3.8
""")

        config = load_config(path)

        assert config.fields == {'message': '%(message)s', 'category': '%(name)s'}
        assert config.prefix == '@cee:'
        assert config.include_context is True
        assert config.placement == Nested('context')
        assert config.max_length_kb == 3.8

    def test_layout_wrapper(self, tmp_path):
        """Should unwrap a top-level layout key"""
        path = tmp_path / 'layout.yml'
        path.write_text("layout:\n  canonical: true\n")

        assert load_config(path).canonical is True

    def test_empty_file(self, tmp_path):
        """Should use defaults for an empty file"""
        path = tmp_path / 'layout.yml'
        path.write_text('')

        assert load_config(path) == LayoutConfig()

    def test_missing_file(self, tmp_path):
        """Should raise ConfigError for a missing file"""
        with pytest.raises(ConfigError, match='Config file not found'):
            load_config(tmp_path / 'missing.yml')

    def test_invalid_yaml(self, tmp_path):
        """Should raise ConfigError for invalid YAML"""
        path = tmp_path / 'layout.yml'
        path.write_text('fields: [unclosed\n')

        with pytest.raises(ConfigError, match='Invalid YAML'):
            load_config(path)

    def test_unknown_key_in_file(self, tmp_path):
        """Should reject unknown keys in the file"""
        path = tmp_path / 'layout.yml'
        path.write_text('max_json_length_kb: 3\n')

        with pytest.raises(ConfigError, match='max_json_length_kb'):
            load_config(path)
