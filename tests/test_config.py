"""
Tests for configuration loading and the config manager.
"""

import logging

import pytest
import toml

import config_manager
from core.config import Config
from core.exceptions import ConfigurationError
from explorer.visualizations import VisualizationType, get_registry


@pytest.fixture
def config_path(tmp_path):
    """Path of a config file inside the test's temporary directory."""
    return tmp_path / "test_config.toml"


@pytest.fixture
def reset_config_manager(monkeypatch, engine_logging):
    """Start each test without a cached global config."""
    monkeypatch.setattr(config_manager, '_config_instance', None)


class TestLoadConfig:
    """Config.load_config()"""

    def test_missing_file_uses_defaults(self, config_path):
        """Test defaults are used and no file is written"""
        config = Config(config_file_path=str(config_path))
        assert config.logging.level == 'INFO'
        assert config.logging.log_file is None
        assert config.visualizations.entries == []
        assert not config_path.exists()

    def test_load_values(self, config_path):
        """Test values are read from the file"""
        config_path.write_text(toml.dumps({
            'logging': {'level': 'DEBUG', 'log_file': 'explorer.log', 'log_dir': 'var/log', 'propagate': True},
            'visualizations': [
                {'id': 'Sunburst', 'type': 'drilldown'},
                {'id': 'Heatmap', 'type': 'pivot-table'},
            ],
        }))
        config = Config(config_file_path=str(config_path))
        assert config.logging.level == 'DEBUG'
        assert config.logging.log_file == 'explorer.log'
        assert config.logging.log_dir == 'var/log'
        assert config.logging.propagate is True
        assert [entry['id'] for entry in config.visualizations.entries] == ['Sunburst', 'Heatmap']
        assert config.validate() == []

    def test_partial_file_keeps_defaults(self, config_path):
        """Test missing keys keep their defaults"""
        config_path.write_text('[logging]\nlevel = "WARNING"\n')
        config = Config(config_file_path=str(config_path))
        assert config.logging.level == 'WARNING'
        assert config.logging.log_dir == 'logs'

    def test_invalid_toml(self, config_path):
        """Test undecodable files raise ConfigurationError"""
        config_path.write_text('[logging\nlevel = "DEBUG"\n')
        with pytest.raises(ConfigurationError) as excinfo:
            Config(config_file_path=str(config_path))
        assert excinfo.value.context['config_file'] == str(config_path)

    def test_visualizations_must_be_array(self, config_path):
        """Test a non-array visualizations section is rejected"""
        config_path.write_text('[visualizations]\nid = "Treemap"\n')
        with pytest.raises(ConfigurationError, match="array of tables"):
            Config(config_file_path=str(config_path))


class TestSaveConfig:
    """Config.save_config()"""

    def test_save_and_reload(self, config_path):
        """Test saved values are loaded back"""
        config = Config(config_file_path=str(config_path))
        config.logging.level = 'ERROR'
        config.visualizations.entries = [{'id': 'Sunburst', 'type': 'drilldown'}]
        config.save_config()

        reloaded = Config(config_file_path=str(config_path))
        assert reloaded.logging.level == 'ERROR'
        assert reloaded.visualizations.entries == [{'id': 'Sunburst', 'type': 'drilldown'}]

    def test_save_to_missing_directory(self, tmp_path):
        """Test write failures raise ConfigurationError"""
        config = Config(config_file_path=str(tmp_path / "missing" / "config.toml"))
        with pytest.raises(ConfigurationError, match="Error saving configuration"):
            config.save_config()


class TestValidateConfig:
    """Config.validate()"""

    def test_invalid_level(self, config_path):
        """Test an unknown log level is reported"""
        config = Config(config_file_path=str(config_path))
        config.logging.level = 'LOUD'
        assert any('level must be one of' in error for error in config.validate())

    def test_invalid_visualizations(self, config_path):
        """Test bad registry entries are reported"""
        config = Config(config_file_path=str(config_path))
        config.visualizations.entries = [
            {'id': 'A', 'type': 'drilldown'},
            {'id': 'A', 'type': 'drilldown'},
            {'type': 'location'},
            {'id': 'B', 'type': 'scatter'},
        ]
        errors = config.validate()
        assert "Duplicate visualization id 'A'" in errors
        assert "Visualization entry 2 is missing 'id'" in errors
        assert any(error.startswith("Visualization entry 3 type") for error in errors)


class TestConfigManager:
    """Global config and engine wiring"""

    def test_get_config_is_cached(self, reset_config_manager, monkeypatch, tmp_path):
        """Test the global config is created once"""
        monkeypatch.chdir(tmp_path)
        assert config_manager.get_config() is config_manager.get_config()
        assert config_manager.refresh_config() is not None

    def test_configure_installs_registry(self, reset_config_manager, monkeypatch, tmp_path):
        """Test configured visualizations become the process-wide registry"""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.toml").write_text(toml.dumps({
            'visualizations': [{'id': 'Sunburst', 'type': 'drilldown'}],
        }))
        config_manager.configure_explorer()
        registry = get_registry()
        assert registry.get_visualization_by_id('Treemap') is None
        assert registry.get_visualization_by_id('Sunburst').type == VisualizationType.DRILLDOWN

    def test_configure_without_entries_uses_builtin(self, reset_config_manager, monkeypatch, tmp_path):
        """Test an empty registry section keeps the built-in visualizations"""
        monkeypatch.chdir(tmp_path)
        config_manager.configure_explorer()
        assert get_registry().get_visualization_by_id('Treemap') is not None

    def test_configure_rejects_invalid_config(self, reset_config_manager, monkeypatch, tmp_path):
        """Test invalid configuration raises ConfigurationError"""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.toml").write_text('[logging]\nlevel = "LOUD"\n')
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            config_manager.configure_explorer()

    def test_configure_keeps_host_logging(self, reset_config_manager, monkeypatch, tmp_path):
        """Test the host's root handlers survive engine configuration"""
        monkeypatch.chdir(tmp_path)
        root_logger = logging.getLogger()
        host_handler = logging.NullHandler()
        root_logger.addHandler(host_handler)
        try:
            config_manager.configure_explorer()
            assert host_handler in root_logger.handlers
        finally:
            root_logger.removeHandler(host_handler)

    def test_configure_applies_propagate(self, reset_config_manager, monkeypatch, tmp_path):
        """Test the propagate setting reaches the engine loggers"""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.toml").write_text('[logging]\npropagate = true\n')
        config_manager.configure_explorer()
        assert logging.getLogger('explorer').propagate
