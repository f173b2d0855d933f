"""Unit tests for configuration"""

import pytest
import yaml

from lms_regression import LMSConfig, load_config, ConfigError


class TestLMSConfig:
    """Test configuration defaults and validation"""

    def test_defaults(self):
        config = LMSConfig()

        assert config.subsample_size == 4
        assert config.random_sampling is False
        assert config.random_seed == 0
        assert config.debug_trace is False
        assert config.failed_trial_policy == 'skip'
        assert config.exclude_first_row is True
        assert config.residual_cutoff == 2.5
        assert config.solver == 'ridge'
        assert config.scale_correction == 'real'
        assert config.validate() is config

    @pytest.mark.parametrize('overrides', [
        {'subsample_size': 0},
        {'subsample_size': 2.5},
        {'subsample_size': True},
        {'random_seed': 2 ** 64},
        {'failed_trial_policy': 'retry'},
        {'solver': 'lasso'},
        {'residual_cutoff': -1.0},
        {'n_jobs': 0},
        {'ridge': -0.1},
        {'scale_correction': 'floor'},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ConfigError):
            LMSConfig(**overrides).validate()

    def test_from_dict(self):
        config = LMSConfig.from_dict({'subsample_size': 3, 'random_seed': -7})

        assert config.subsample_size == 3
        assert config.random_seed == -7

    def test_from_dict_unknown_key(self):
        with pytest.raises(ConfigError, match='Unknown configuration keys'):
            LMSConfig.from_dict({'samples': 3})

    def test_to_dict_round_trip(self):
        config = LMSConfig(subsample_size=5, debug_trace=True)
        assert LMSConfig.from_dict(config.to_dict()) == config


class TestLoadConfig:
    """Test YAML configuration files"""

    def test_nested_section(self, temp_data_dir):
        path = temp_data_dir / 'config.yaml'
        path.write_text(yaml.safe_dump({'lms': {'subsample_size': 3, 'failed_trial_policy': 'abort'}}))

        config = load_config(path)

        assert config.subsample_size == 3
        assert config.failed_trial_policy == 'abort'

    def test_top_level_mapping(self, temp_data_dir):
        path = temp_data_dir / 'config.yaml'
        path.write_text("random_sampling: true\nn_jobs: 2\n")

        config = load_config(path)

        assert config.random_sampling is True
        assert config.n_jobs == 2

    def test_empty_file_gives_defaults(self, temp_data_dir):
        path = temp_data_dir / 'config.yaml'
        path.write_text("")

        assert load_config(path) == LMSConfig()

    def test_non_mapping_rejected(self, temp_data_dir):
        path = temp_data_dir / 'config.yaml'
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_value_rejected(self, temp_data_dir):
        path = temp_data_dir / 'config.yaml'
        path.write_text("lms:\n  subsample_size: 0\n")

        with pytest.raises(ConfigError):
            load_config(path)
