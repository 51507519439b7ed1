"""
Services Package

Contains the data access and credential services.
"""

from .credential_service import CredentialService, get_credential_service, initialize_credential_service
from .user_service import UserService, get_user_service, initialize_user_service

__all__ = [
    'CredentialService', 'get_credential_service', 'initialize_credential_service',
    'UserService', 'get_user_service', 'initialize_user_service'
]
