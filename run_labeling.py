#!/usr/bin/env python3
"""
FidLabeling - 命令行入口
读取模体配置与一帧的点/直线候选，输出点标注结果
"""

import sys
import json
import math
import logging
import argparse
from pathlib import Path

import yaml

from fid_labeling import FidLabeling, Dot, ConfigurationError, ConfigManager, __version__

EXIT_FOUND = 0
EXIT_CONFIG_ERROR = 1
EXIT_NOT_FOUND = 2
EXIT_FRAME_ERROR = 3


def parse_arguments(argv=None):
    """解析命令行参数"""
    parser = argparse.ArgumentParser(description='Calibration phantom fiducial labeling')

    parser.add_argument('--config', required=True,
                       help='模体配置文件路径 (YAML)')
    parser.add_argument('--frame', required=True,
                       help='帧数据文件路径 (YAML/JSON，包含 dots 与 lines)')
    parser.add_argument('--min-theta-deg', type=float, default=None,
                       help='直线最小角度，覆盖配置文件')
    parser.add_argument('--max-theta-deg', type=float, default=None,
                       help='直线最大角度，覆盖配置文件')
    parser.add_argument('--output', type=str, default=None,
                       help='结果输出文件 (YAML)')
    parser.add_argument('--verbose', action='store_true',
                       help='输出调试日志')
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")

    return parser.parse_args(argv)


def load_frame(frame_path):
    """
    读取帧数据

    Returns:
        dots: 候选点列表
        lines: 候选直线（点索引列表、坐标点列表或其分组）
    """
    frame_path = Path(frame_path)
    if not frame_path.exists():
        raise FileNotFoundError(f"Frame file not found: {frame_path}")

    with open(frame_path, 'r', encoding='utf-8') as f:
        if frame_path.suffix.lower() == '.json':
            frame = json.load(f)
        else:
            frame = yaml.safe_load(f) or {}

    if not isinstance(frame, dict):
        raise ValueError(f"Frame file must contain a mapping with dots and lines: {frame_path}")

    dots = [Dot(*(float(v) for v in dot)) for dot in frame.get('dots') or []]
    return dots, frame.get('lines') or []


def outcome_to_dict(outcome):
    """结果转换为可序列化的字典"""
    return {
        'dots_found': outcome.dots_found,
        'pattern_id': outcome.pattern_id,
        'pattern_name': outcome.pattern_name,
        'pattern_intensity': outcome.pattern_intensity,
        'labeler_version': __version__,
        'results': [
            {'pattern_id': r.pattern_id, 'wire_id': r.wire_id, 'wire_name': r.wire_name, 'x': r.x, 'y': r.y}
            for r in outcome.results
        ],
    }


def print_outcome(outcome):
    """打印标注结果"""
    print("=" * 60)
    if not outcome.dots_found:
        print("No pattern found")
        print("=" * 60)
        return

    print(f"Pattern: {outcome.pattern_name} (id {outcome.pattern_id}), "
          f"intensity {outcome.pattern_intensity:.2f}, {outcome.processing_time:.2f} ms")
    print("-" * 60)
    print(f"{'wire':>6}  {'name':<16}{'x':>10}{'y':>10}")
    for result in outcome.results:
        print(f"{result.wire_id:>6}  {str(result.wire_name):<16}{result.x:>10.2f}{result.y:>10.2f}")
    print("=" * 60)


def main(argv=None):
    """主函数"""
    args = parse_arguments(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    min_theta = math.radians(args.min_theta_deg) if args.min_theta_deg is not None else None
    max_theta = math.radians(args.max_theta_deg) if args.max_theta_deg is not None else None

    try:
        labeling = FidLabeling.from_config_file(args.config, min_theta, max_theta)
    except (ConfigurationError, FileNotFoundError) as e:
        logging.getLogger(__name__).error(f"Failed to read configuration: {e}")
        return EXIT_CONFIG_ERROR

    try:
        dots, lines = load_frame(args.frame)
    except (FileNotFoundError, yaml.YAMLError, ValueError, TypeError) as e:
        logging.getLogger(__name__).error(f"Failed to read frame: {e}")
        return EXIT_FRAME_ERROR

    outcome = labeling.find_pattern(dots, lines)
    print_outcome(outcome)

    if args.output:
        ConfigManager.save_config(outcome_to_dict(outcome), args.output)
        print(f"Results saved to {args.output}")

    return EXIT_FOUND if outcome.dots_found else EXIT_NOT_FOUND


if __name__ == "__main__":
    sys.exit(main())
