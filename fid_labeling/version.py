"""版本信息"""

VERSION_INFO = {
    'major': 1,
    'minor': 0,
    'patch': 0,
    'status': 'stable'  # dev, rc, stable
}


def get_version_string(with_status: bool = False) -> str:
    """主版本.次版本.修订号，非正式版本附加状态后缀"""
    version = f"{VERSION_INFO['major']}.{VERSION_INFO['minor']}.{VERSION_INFO['patch']}"
    if with_status and VERSION_INFO['status'] != 'stable':
        version += f"-{VERSION_INFO['status']}"
    return version


__version__ = get_version_string(with_status=True)
