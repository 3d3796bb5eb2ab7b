import platform


def current_platform() -> str:
    return platform.system()


def is_supported() -> bool:
    # logind is Linux only
    return current_platform() == 'Linux'
