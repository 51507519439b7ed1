"""
Controllers Package

Contains the HTTP blueprints.
"""

from .user_controller import users_bp

__all__ = ['users_bp']
