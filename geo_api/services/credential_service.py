"""
Credential Service

Handles password hashing with bcrypt and bearer token (JWT) issuance
and verification.
"""

import datetime
from typing import Any, Dict, Optional

import bcrypt
import jwt

JWT_ALGORITHM = "HS256"
# Longest password bcrypt accepts
MAX_PASSWORD_BYTES = 72


class CredentialService:
    """
    Hashes and verifies passwords, signs and verifies access tokens.
    """
    
    def __init__(self, jwt_secret: str, expiration_days: int = 7, bcrypt_rounds: int = 10):
        """
        Initialize the credential service.
        
        Args:
            jwt_secret: Secret key used to sign tokens
            expiration_days: Lifetime of issued tokens
            bcrypt_rounds: bcrypt cost factor
        """
        self.jwt_secret = jwt_secret
        self.expiration_days = expiration_days
        self.bcrypt_rounds = bcrypt_rounds
    
    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt.
        
        Args:
            password: Plain text password
            
        Returns:
            Hashed password as string
        """
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')
    
    def verify_password(self, password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.
        
        Args:
            password: Plain text password
            hashed_password: Stored hashed password
            
        Returns:
            True if password matches, False otherwise
        """
        if not isinstance(password, str) or not hashed_password:
            return False
        encoded = password.encode('utf-8')
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(encoded, hashed_password.encode('utf-8'))
    
    def issue_token(self, user_id: str) -> str:
        """
        Sign a token for the given user, valid for ``expiration_days``.
        
        Args:
            user_id: Identifier stored in the ``sub`` claim
            
        Returns:
            Encoded JWT
        """
        claims = {
            "sub": user_id,
            "exp": datetime.datetime.utcnow() + datetime.timedelta(days=self.expiration_days)
        }
        return jwt.encode(claims, self.jwt_secret, algorithm=JWT_ALGORITHM)
    
    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Decode a token, returning its claims or None when it is invalid or expired.
        """
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=[JWT_ALGORITHM])
        except jwt.InvalidTokenError:
            return None
        if not payload.get("sub"):
            return None
        return payload
    
    def authenticate(self, request) -> Optional[Dict[str, Any]]:
        """
        Resolve the principal presenting a bearer token on the request.
        
        Returns:
            ``{"id": <user id>}`` or None if the request is not authenticated
        """
        auth_header = request.headers.get('Authorization')
        if not auth_header or not auth_header.startswith('Bearer '):
            return None
        
        payload = self.verify_token(auth_header.split(' ', 1)[1].strip())
        if payload is None:
            return None
        return {"id": payload["sub"]}


# Global service instance
_credential_service = None


def get_credential_service() -> Optional[CredentialService]:
    """Get the global credential service instance."""
    return _credential_service


def initialize_credential_service(jwt_secret: str, expiration_days: int = 7,
                                  bcrypt_rounds: int = 10) -> CredentialService:
    """Initialize the global credential service instance."""
    global _credential_service
    _credential_service = CredentialService(jwt_secret, expiration_days, bcrypt_rounds)
    return _credential_service
