"""
User Data Models

Contains user-related data structures and their public (response) views.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from datetime import datetime


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


@dataclass
class User:
    """User data model as stored in the users collection."""
    id: str
    username: str
    password: Optional[str] = None  # bcrypt hash, never plaintext
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> 'User':
        """Build a User from a MongoDB document."""
        return cls(
            id=str(doc['_id']),
            username=doc.get('username'),
            password=doc.get('password'),
            created_at=doc.get('createdAt')
        )

    def to_public_dict(self) -> Dict[str, Any]:
        """Serializable view of the user. The password hash is left out."""
        return {
            'id': self.id,
            'username': self.username,
            'createdAt': _format_timestamp(self.created_at)
        }


@dataclass
class UserScores(User):
    """User enriched with score statistics aggregated from its guesses."""
    total_score: float = 0
    max_score: float = 0
    average_score: float = 0.0

    @classmethod
    def from_aggregate(cls, row: Dict[str, Any]) -> 'UserScores':
        """Build from one row of the score aggregation pipeline."""
        return cls(
            id=str(row['_id']),
            username=row.get('username'),
            created_at=row.get('createdAt'),
            total_score=row.get('totalScore'),
            max_score=row.get('maxScore'),
            average_score=row.get('averageScore')
        )

    def to_public_dict(self) -> Dict[str, Any]:
        data = super().to_public_dict()
        data['totalScore'] = self.total_score
        data['maxScore'] = self.max_score
        data['averageScore'] = self.average_score
        return data
