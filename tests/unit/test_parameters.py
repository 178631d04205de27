#!/usr/bin/env python3
"""
容差参数与配置解析单元测试
"""

import copy
import math
import pytest
from dataclasses import replace

from fid_labeling.core.configuration import read_configuration
from fid_labeling.core.parameters import ToleranceParameters, update_parameters, parameters_from_config
from fid_labeling.patterns.pattern_definition import PatternLibrary
from fid_labeling.utils.exceptions import ConfigurationError


class TestReadConfiguration:
    """read_configuration测试类"""

    def test_read_configuration(self, n_line_config):
        parameters, library = read_configuration(n_line_config)

        assert parameters.approximate_spacing_mm_per_pixel == 1.0
        assert parameters.frame_size == (640, 480)
        assert parameters.max_line_shift_mm == 5.0
        assert parameters.min_theta_rad == pytest.approx(-math.pi / 2)
        assert parameters.max_theta_rad == pytest.approx(math.pi / 2)
        assert library.ids() == [0]

    def test_theta_arguments_override_tree(self, n_line_config):
        """显式角度范围覆盖配置值"""
        parameters, _ = read_configuration(n_line_config, min_theta_rad=-0.5, max_theta_rad=0.25)
        assert parameters.min_theta_rad == -0.5
        assert parameters.max_theta_rad == 0.25

    def test_inverted_theta_arguments(self, n_line_config):
        with pytest.raises(ConfigurationError):
            read_configuration(n_line_config, min_theta_rad=0.5, max_theta_rad=-0.5)

    def test_inverted_theta_in_tree(self, n_line_config):
        config = copy.deepcopy(n_line_config)
        config['Segmentation']['min_theta_deg'] = 30
        config['Segmentation']['max_theta_deg'] = -30
        with pytest.raises(ConfigurationError):
            read_configuration(config)

    @pytest.mark.parametrize('section', ['Segmentation', 'PhantomDefinition'])
    def test_missing_section(self, n_line_config, section):
        config = copy.deepcopy(n_line_config)
        del config[section]
        with pytest.raises(ConfigurationError):
            read_configuration(config)

    def test_missing_spacing(self, n_line_config):
        config = copy.deepcopy(n_line_config)
        del config['Segmentation']['approximate_spacing_mm_per_pixel']
        with pytest.raises(ConfigurationError):
            read_configuration(config)

    def test_missing_patterns(self, n_line_config):
        config = copy.deepcopy(n_line_config)
        config['PhantomDefinition'] = {}
        with pytest.raises(ConfigurationError):
            read_configuration(config)

    @pytest.mark.parametrize('key, value', [
        ('approximate_spacing_mm_per_pixel', 0.0),
        ('approximate_spacing_mm_per_pixel', 'abc'),
        ('max_line_pair_distance_error_percent', -1),
        ('angle_tolerance_deg', -2),
        ('max_line_shift_mm', -0.1),
        ('frame_size', [640, 0]),
    ])
    def test_invalid_segmentation_values(self, segmentation_config, key, value):
        segmentation_config[key] = value
        with pytest.raises(ConfigurationError):
            parameters_from_config(segmentation_config)

    def test_configuration_root_must_be_mapping(self):
        with pytest.raises(ConfigurationError):
            read_configuration(['Segmentation'])


class TestUpdateParameters:
    """推导容差测试"""

    def test_distance_widened_and_converted_to_pixels(self, n_line_config):
        parameters, library = read_configuration(n_line_config)
        parameters = replace(parameters, approximate_spacing_mm_per_pixel=0.5)

        derived = update_parameters(parameters, library)
        first_pair = derived.pair_tolerances(0)[0]

        # 20 mm ±10%，0.5 mm/像素
        assert first_pair.distance_px == pytest.approx((36.0, 44.0))
        assert first_pair.angle_rad == pytest.approx((0.0, math.radians(5.0)))
        # N线图案未配置偏移时使用 ±max_line_shift_mm
        assert first_pair.shift_px == pytest.approx((-10.0, 10.0))

    def test_angle_range_clamped(self, fixed_triple_config):
        config = copy.deepcopy(fixed_triple_config)
        config['Segmentation']['angle_tolerance_deg'] = 50
        parameters, library = read_configuration(config)

        derived = update_parameters(parameters, library)
        diagonal_pair = derived.pair_tolerances(7)[1]
        assert diagonal_pair.angle_rad == pytest.approx((0.0, math.pi / 2))
        assert diagonal_pair.shift_px is None  # 三线图案只在配置时检查偏移

    def test_zero_tolerance_keeps_exact_bounds(self, n_line_config):
        config = copy.deepcopy(n_line_config)
        config['Segmentation']['max_line_pair_distance_error_percent'] = 0
        parameters, library = read_configuration(config)

        derived = update_parameters(parameters, library)
        assert derived.pair_tolerances(0)[0].distance_px == (20.0, 20.0)

    def test_collinear_tolerance(self, n_line_config):
        config = copy.deepcopy(n_line_config)
        config['Segmentation']['collinear_points_max_distance_mm'] = 0.6
        config['Segmentation']['approximate_spacing_mm_per_pixel'] = 0.2
        parameters, library = read_configuration(config)

        derived = update_parameters(parameters, library)
        assert derived.collinear_max_distance_px == pytest.approx(3.0)
        assert derived.frame_size == (640, 480)

    def test_empty_library(self):
        derived = update_parameters(ToleranceParameters(approximate_spacing_mm_per_pixel=1.0), PatternLibrary())
        assert derived.pairs == {}
        assert derived.collinear_max_distance_px is None
