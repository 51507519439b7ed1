"""
Utilities Package

Contains decorators, pagination helpers and the API logger.
"""

from .api_logger import api_logger
from .decorators import require_auth, require_json, load_user_from_params
from .pagination import get_pagination_parameters, add_link_header

__all__ = [
    'api_logger', 'require_auth', 'require_json', 'load_user_from_params',
    'get_pagination_parameters', 'add_link_header'
]
