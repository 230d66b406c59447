"""
===============================================================================
APPARENT POSITION - Configuration and Entry Point Test Suite
===============================================================================
Tests for loading and validating the YAML pipeline configuration and for
the command-line entry point.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest
import yaml

from core.config import DEFAULT_CONFIG_PATH, PipelineConfig, load_config
import main


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def write_config(tmp_path):
    """Write a mapping to a YAML file and return its path."""
    def _write(data, name='pipeline.yaml'):
        path = tmp_path / name
        with open(path, 'w') as f:
            yaml.safe_dump(data, f)
        return str(path)
    return _write


# =============================================================================
# Loading
# =============================================================================

class TestLoadConfig:
    """load_config and PipelineConfig.from_dict."""

    def test_default_file(self):
        assert DEFAULT_CONFIG_PATH.exists()
        config = load_config()
        assert config == PipelineConfig()

    def test_full_file(self, write_config):
        path = write_config({
            'models': {'precession': 'vondrak_2011'},
            'corrections': {'light_time': False, 'aberration': True},
            'earth_velocity': {'method': 'kepler', 'step_days': 0.25},
            'logging': {'level': 'debug'},
        })
        config = load_config(path)
        assert config.precession == 'VONDRAK_2011'
        assert config.light_time is False
        assert config.aberration is True
        assert config.earth_velocity_method == 'kepler'
        assert config.step_days == 0.25
        assert config.log_level == 'DEBUG'

    def test_partial_file_keeps_defaults(self, write_config):
        config = load_config(write_config({'models': {'precession': 'IAU_1976'}}))
        assert config.precession == 'IAU_1976'
        assert config.light_time is True
        assert config.earth_velocity_method == 'derivative'
        assert config.step_days == 0.1

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'empty.yaml'
        path.write_text('')
        assert load_config(str(path)) == PipelineConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / 'absent.yaml'))


# =============================================================================
# Validation
# =============================================================================

class TestValidation:
    """Rejected settings raise ValueError."""

    @pytest.mark.parametrize("data, match", [
        ({'models': {'precession': 'NEWCOMB_1895'}}, "Unknown precession model"),
        ({'earth_velocity': {'method': 'numerical'}}, "earth_velocity"),
        ({'earth_velocity': {'step_days': 0.0}}, "step_days"),
        ({'earth_velocity': {'step_days': -1.0}}, "step_days"),
        ({'logging': {'level': 'VERBOSE'}}, "log level"),
    ])
    def test_invalid_values(self, write_config, data, match):
        with pytest.raises(ValueError, match=match):
            load_config(write_config(data))

    def test_non_mapping(self, write_config):
        with pytest.raises(ValueError, match="mapping"):
            load_config(write_config(['WILLIAMS_1994']))

    def test_direct_construction(self):
        assert PipelineConfig(precession='de4xx').precession == 'DE4XX'
        with pytest.raises(ValueError):
            PipelineConfig(earth_velocity_method='spline')


# =============================================================================
# Command line
# =============================================================================

class TestMain:
    """main.main end to end."""

    def test_prints_position(self, capsys):
        assert main.main(['--body', 'mars', '--t', '0.0']) == 0
        out = capsys.readouterr().out
        assert 'MARS' in out
        assert 'RA' in out and 'Dec' in out
        assert 'Light time' in out

    def test_geometric(self, capsys):
        assert main.main(['--body', 'venus', '--mjd', '60000.0', '--geometric',
                          '--precession', 'iau_2006']) == 0
        out = capsys.readouterr().out
        assert 'IAU_2006' in out
        assert 'Light time' not in out

    def test_julian_date_matches_mjd(self, capsys):
        """JD 2451545.0 and MJD 51544.5 are both J2000."""
        main.main(['--body', 'jupiter', '--jd', '2451545.0'])
        from_jd = capsys.readouterr().out
        main.main(['--body', 'jupiter', '--mjd', '51544.5'])
        assert capsys.readouterr().out == from_jd
        assert 'T = +0.0000000000' in from_jd
        assert 'km)' in from_jd

    def test_unknown_body(self):
        with pytest.raises(SystemExit):
            main.main(['--body', 'vulcan'])

    @pytest.mark.parametrize("hours, text", [
        (0.0, "00h 00m 00.00s"),
        (13.5, "13h 30m 00.00s"),
    ])
    def test_format_hms(self, hours, text):
        assert main.format_hms(hours) == text

    @pytest.mark.parametrize("degrees, text", [
        (-23.5, "-23d 30' 00.0\""),
        (7.25, "+07d 15' 00.0\""),
    ])
    def test_format_dms(self, degrees, text):
        assert main.format_dms(degrees) == text
