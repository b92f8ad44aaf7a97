from .errors import ErrorCode, HassError

__all__ = [
    'ErrorCode',
    'HassError',
]
