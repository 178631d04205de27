"""
异常定义
标定模体识别过程中使用的错误类型
"""


class FidLabelingError(Exception):
    """所有标注错误的基类"""


class ConfigurationError(FidLabelingError):
    """模体定义或容差配置缺失/非法，在处理任何帧之前抛出"""


class InvalidGeometry(FidLabelingError):
    """退化的点或直线输入（少于2个点、端点重合、越界等）"""
