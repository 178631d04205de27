#!/usr/bin/env python3
"""
命令行入口测试
"""

import json
import pytest
import yaml
from pathlib import Path

import run_labeling

CONFIG_DIR = Path(__file__).parent.parent.parent / 'configs'
FCAL_CONFIG = str(CONFIG_DIR / 'fcal_3.1.yaml')


def _frame(rows):
    """两条水平线，每条3点"""
    dots = []
    for y in rows:
        dots.extend([[300.0 + 40.0 * i, y, 1.0] for i in range(3)])
    lines = [[3 * i, 3 * i + 1, 3 * i + 2] for i in range(len(rows))]
    return {'dots': dots, 'lines': lines}


class TestCommandLine:
    """run_labeling.main 测试"""

    def test_pattern_found(self, tmp_path, capsys):
        frame_path = tmp_path / 'frame.yaml'
        output_path = tmp_path / 'out' / 'result.yaml'
        frame_path.write_text(yaml.safe_dump(_frame([200.0, 328.0])))

        code = run_labeling.main(['--config', FCAL_CONFIG, '--frame', str(frame_path),
                                  '--output', str(output_path)])

        assert code == run_labeling.EXIT_FOUND
        assert 'fCal-3.1' in capsys.readouterr().out

        with open(output_path, 'r') as f:
            saved = yaml.safe_load(f)
        assert saved['dots_found'] is True
        assert saved['pattern_id'] == 0
        assert [r['wire_id'] for r in saved['results']] == list(range(6))

    def test_json_frame_not_found(self, tmp_path, capsys):
        frame_path = tmp_path / 'frame.json'
        frame_path.write_text(json.dumps(_frame([200.0])))

        code = run_labeling.main(['--config', FCAL_CONFIG, '--frame', str(frame_path)])

        assert code == run_labeling.EXIT_NOT_FOUND
        assert 'No pattern found' in capsys.readouterr().out

    def test_theta_override(self, tmp_path):
        frame = _frame([200.0, 328.0])
        frame_path = tmp_path / 'frame.yaml'
        frame_path.write_text(yaml.safe_dump(frame))

        code = run_labeling.main(['--config', FCAL_CONFIG, '--frame', str(frame_path),
                                  '--min-theta-deg', '10', '--max-theta-deg', '20'])

        assert code == run_labeling.EXIT_NOT_FOUND

    def test_invalid_configuration(self, tmp_path):
        config_path = tmp_path / 'broken.yaml'
        config_path.write_text(yaml.safe_dump({'Segmentation': {'max_line_shift_mm': 5.0}}))
        frame_path = tmp_path / 'frame.yaml'
        frame_path.write_text(yaml.safe_dump(_frame([200.0, 328.0])))

        code = run_labeling.main(['--config', str(config_path), '--frame', str(frame_path)])

        assert code == run_labeling.EXIT_CONFIG_ERROR

    def test_missing_config_file(self, tmp_path):
        code = run_labeling.main(['--config', str(tmp_path / 'missing.yaml'),
                                  '--frame', str(tmp_path / 'frame.yaml')])
        assert code == run_labeling.EXIT_CONFIG_ERROR

    @pytest.mark.parametrize('content', [
        'dots: [[1, 2',                    # YAML语法错误
        '- [1, 2]',                        # 顶层不是字典
        'dots: [[1, abc]]',                # 坐标不是数值
        'dots: [[1, 2, 3, 4, 5]]',         # 坐标个数错误
    ])
    def test_malformed_frame(self, tmp_path, content):
        frame_path = tmp_path / 'frame.yaml'
        frame_path.write_text(content)

        code = run_labeling.main(['--config', FCAL_CONFIG, '--frame', str(frame_path)])

        assert code == run_labeling.EXIT_FRAME_ERROR

    def test_missing_frame_file(self, tmp_path):
        code = run_labeling.main(['--config', FCAL_CONFIG, '--frame', str(tmp_path / 'missing.yaml')])
        assert code == run_labeling.EXIT_FRAME_ERROR

    def test_load_frame(self, tmp_path):
        frame_path = tmp_path / 'frame.yaml'
        frame_path.write_text(yaml.safe_dump({'dots': [[1, 2], [3, 4, 0.5]], 'lines': [[0, 1]]}))

        dots, lines = run_labeling.load_frame(frame_path)

        assert [(d.x, d.y, d.intensity) for d in dots] == [(1.0, 2.0, 0.0), (3.0, 4.0, 0.5)]
        assert lines == [[0, 1]]

    def test_load_missing_frame(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            run_labeling.load_frame(tmp_path / 'missing.yaml')

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_labeling.main(['--version'])
        assert exc_info.value.code == 0
        assert '1.0.0' in capsys.readouterr().out
