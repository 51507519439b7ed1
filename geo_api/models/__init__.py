"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .user import User, UserScores

__all__ = ['User', 'UserScores']
