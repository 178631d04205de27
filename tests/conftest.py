"""
pytest配置文件
定义测试夹具和全局配置
"""

import math
import pytest
import sys
from pathlib import Path

# 添加项目路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fid_labeling import Dot, Line


def make_line(x0, y0, angle_deg=0.0, step=50.0, count=3, intensity=1.0, dx=None, dy=None):
    """从 (x0, y0) 出发沿给定角度等间距生成点"""
    if dx is None or dy is None:
        dx = step * math.cos(math.radians(angle_deg))
        dy = step * math.sin(math.radians(angle_deg))
    return Line([Dot(x0 + i * dx, y0 + i * dy, intensity) for i in range(count)])


def horizontal_line(y, x0=100.0, count=3, step=50.0, intensity=1.0):
    """水平直线，坐标精确可表示"""
    return Line([Dot(x0 + i * step, float(y), intensity) for i in range(count)])


@pytest.fixture
def line_factory():
    """直线生成函数"""
    return make_line


@pytest.fixture
def horizontal_line_factory():
    return horizontal_line


@pytest.fixture
def segmentation_config():
    """像素间距为1 mm，mm与像素一致"""
    return {
        'approximate_spacing_mm_per_pixel': 1.0,
        'max_line_pair_distance_error_percent': 10,
        'max_angle_difference_deg': 10,
        'angle_tolerance_deg': 5,
        'min_theta_deg': -90,
        'max_theta_deg': 90,
        'max_line_shift_mm': 5.0,
        'frame_size': [640, 480],
    }


@pytest.fixture
def n_line_config(segmentation_config):
    """5条平行线，每条3点，间距20 mm"""
    return {
        'Segmentation': segmentation_config,
        'PhantomDefinition': {
            'patterns': [
                {
                    'id': 0,
                    'name': 'NWire-5',
                    'family': 'n_line',
                    'line_count': 5,
                    'points_per_line': 3,
                    'line_spacing_mm': [20.0, 20.0, 20.0, 20.0],
                }
            ]
        }
    }


@pytest.fixture
def fixed_triple_config(segmentation_config):
    """左右竖直线间距20 mm，中间45度斜线"""
    return {
        'Segmentation': segmentation_config,
        'PhantomDefinition': {
            'patterns': [
                {
                    'id': 7,
                    'name': 'CIRS-045',
                    'family': 'fixed_triple',
                    'wire_names': ['left', 'diagonal', 'right'],
                    'pairs': [
                        {'lines': ['left', 'right'], 'distance_mm': [20.0, 20.0],
                         'angle_deg': [0.0, 0.0], 'shift_mm': [-5.0, 5.0]},
                        {'lines': ['left', 'diagonal'], 'distance_mm': [10.0, 10.0],
                         'angle_deg': [45.0, 45.0]},
                        {'lines': ['diagonal', 'right'], 'distance_mm': [7.07, 7.07],
                         'angle_deg': [45.0, 45.0]},
                    ],
                }
            ]
        }
    }


@pytest.fixture
def five_parallel_lines():
    """满足 NWire-5 的5条水平线"""
    return [horizontal_line(y) for y in (100.0, 120.0, 140.0, 160.0, 180.0)]


@pytest.fixture
def cirs_lines():
    """左竖直线 x=100，斜线中点 (110, 150)，右竖直线 x=120"""
    left = Line([Dot(100.0, 100.0), Dot(100.0, 150.0), Dot(100.0, 200.0)])
    diagonal = Line([Dot(105.0, 145.0), Dot(110.0, 150.0), Dot(115.0, 155.0)])
    right = Line([Dot(120.0, 100.0), Dot(120.0, 150.0), Dot(120.0, 200.0)])
    return left, diagonal, right
