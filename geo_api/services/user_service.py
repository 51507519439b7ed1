"""
User Service

Data access for user accounts stored in MongoDB, including the aggregation
that joins each user to its guesses to compute score statistics.
"""

import datetime
from typing import Any, Dict, List, Optional, Sequence

from bson.objectid import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..models.user import User, UserScores
from ..utils.api_logger import api_logger

USERS_COLLECTION = "users"
GUESSES_COLLECTION = "guesses"


def build_user_filter(usernames: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    """Query matching the users selected by the list endpoint."""
    if usernames:
        return {"username": {"$in": list(usernames)}}
    return {}


def build_score_pipeline(page: int, page_size: int,
                         user_filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Aggregation pipeline computing total, max and average score per user.
    
    The lookup is unwound without ``preserveNullAndEmptyArrays`` so users
    without any guess drop out of the result. Rows are ordered by ``_id``,
    i.e. creation order, before the page window is applied.
    
    Args:
        page: 1-based page number
        page_size: Number of rows per page
        user_filter: Optional query restricting the users considered
        
    Returns:
        List of pipeline stages
    """
    pipeline = []
    if user_filter:
        pipeline.append({"$match": user_filter})
    
    pipeline.extend([
        {
            "$lookup": {
                "from": GUESSES_COLLECTION,
                "localField": "_id",
                "foreignField": "user_id",
                "as": "obtainedScores"
            }
        },
        {"$unwind": "$obtainedScores"},
        {
            "$group": {
                "_id": "$_id",
                "username": {"$first": "$username"},
                "createdAt": {"$first": "$createdAt"},
                "totalScore": {"$sum": "$obtainedScores.score"},
                "maxScore": {"$max": "$obtainedScores.score"},
                "averageScore": {"$avg": "$obtainedScores.score"}
            }
        },
        {"$sort": {"_id": ASCENDING}},
        {"$skip": (page - 1) * page_size},
        {"$limit": page_size}
    ])
    return pipeline


class UserService:
    """
    User store backed by the ``users`` and ``guesses`` collections.
    """
    
    def __init__(self, db):
        """
        Initialize the service on an already connected database.
        
        Args:
            db: pymongo Database (or a compatible test double)
        """
        self.db = db
        self.users_collection = db[USERS_COLLECTION]
        self.guesses_collection = db[GUESSES_COLLECTION]
        
        # Username uniqueness is enforced by the store, not by a read-then-write check
        self.users_collection.create_index("username", unique=True)
        self.guesses_collection.create_index("user_id")
    
    def find_by_id(self, user_id: str) -> Optional[User]:
        """
        Get a user by identifier.
        
        Args:
            user_id: String form of a valid ObjectId
            
        Returns:
            User or None if not found
        """
        doc = self.users_collection.find_one({"_id": ObjectId(user_id)})
        return User.from_document(doc) if doc else None
    
    def find_by_username(self, username: str) -> Optional[User]:
        """Get the user with exactly this username."""
        doc = self.users_collection.find_one({"username": username})
        return User.from_document(doc) if doc else None
    
    def count_by_username(self, username: str) -> int:
        return self.users_collection.count_documents({"username": username})
    
    def create_user(self, username: str, password_hash: str,
                    user_id: Optional[ObjectId] = None) -> User:
        """
        Insert a new user document.
        
        Args:
            username: Account name
            password_hash: bcrypt hash of the password
            user_id: Identifier to use, generated by the store when omitted
            
        Returns:
            The stored User
            
        Raises:
            pymongo.errors.DuplicateKeyError: If the username is taken
        """
        user_doc = {
            "username": username,
            "password": password_hash,
            # BSON dates have millisecond precision
            "createdAt": datetime.datetime.utcnow().replace(microsecond=0)
        }
        if user_id is not None:
            user_doc["_id"] = user_id
        
        result = self.users_collection.insert_one(user_doc)
        user_doc["_id"] = result.inserted_id
        return User.from_document(user_doc)
    
    def update_user(self, user_id: str, changes: Dict[str, Any]) -> Optional[User]:
        """
        Apply a partial update and return the updated user.
        
        Raises:
            pymongo.errors.DuplicateKeyError: If the new username is taken
        """
        if not changes:
            return self.find_by_id(user_id)
        
        doc = self.users_collection.find_one_and_update(
            {"_id": ObjectId(user_id)},
            {"$set": changes},
            return_document=ReturnDocument.AFTER
        )
        return User.from_document(doc) if doc else None
    
    def delete_user(self, user_id: str) -> bool:
        """
        Remove a user. Guesses referencing it are left in place.
        
        Returns:
            True if a document was deleted
        """
        result = self.users_collection.delete_one({"_id": ObjectId(user_id)})
        return result.deleted_count > 0
    
    def count_users(self, usernames: Optional[Sequence[str]] = None) -> int:
        return self.users_collection.count_documents(build_user_filter(usernames))
    
    def list_user_scores(self, page: int, page_size: int,
                         usernames: Optional[Sequence[str]] = None) -> List[UserScores]:
        """
        Get one page of users with their aggregated scores.
        
        Args:
            page: 1-based page number
            page_size: Number of users per page
            usernames: Optional exact usernames to restrict the listing to
            
        Returns:
            List of UserScores ordered by identifier
        """
        pipeline = build_score_pipeline(page, page_size, build_user_filter(usernames))
        return [UserScores.from_aggregate(row) for row in self.users_collection.aggregate(pipeline)]
    
    def close_connection(self):
        """Close the MongoDB connection."""
        client = getattr(self.db, "client", None)
        if client:
            client.close()


# Global service instance
_user_service = None


def get_user_service() -> Optional[UserService]:
    """Get the global user service instance."""
    return _user_service


def initialize_user_service(mongo_uri: str, db_name: str, client=None) -> UserService:
    """
    Initialize the global user service instance.
    
    Args:
        mongo_uri: MongoDB connection string, used when no client is given
        db_name: Database holding the users and guesses collections
        client: Already constructed client (e.g. an in-memory one for tests)
    """
    global _user_service
    if client is None:
        client = MongoClient(mongo_uri, server_api=ServerApi('1'))
        try:
            client.admin.command('ping')
            api_logger.logger.info(f"Connected to MongoDB database '{db_name}'")
        except Exception as e:
            api_logger.logger.error(f"MongoDB connection error: {e}")
            raise
    
    _user_service = UserService(client[db_name])
    return _user_service
