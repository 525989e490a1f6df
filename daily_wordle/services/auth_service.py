"""
Authentication Service

Handles user registration, login, password hashing, and JWT token
management using MongoDB for data storage. The game core only ever sees the
user id this service vouches for.
"""

import bcrypt
import jwt
import datetime
import hashlib
import uuid
from typing import Optional, Dict, Any

from bson.errors import InvalidId
from bson.objectid import ObjectId
from pymongo.errors import DuplicateKeyError

from ..models.user import User

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 10


class AuthService:
    """
    Authentication service for handling user registration, login, and token management.
    """

    def __init__(self, database, jwt_secret: str, expiration_days: int = 7):
        """
        Initialize the authentication service.

        Args:
            database: pymongo Database holding the users and sessions collections
            jwt_secret: Secret key for JWT token generation
            expiration_days: Lifetime of issued tokens
        """
        self.jwt_secret = jwt_secret
        self.expiration_days = expiration_days

        self.users_collection = database.users
        self.sessions_collection = database.sessions

        # Create unique index on username
        self.users_collection.create_index("username", unique=True)

        self.sessions_collection.create_index("token_hash", unique=True)
        self.sessions_collection.create_index("expires_at", expireAfterSeconds=0)  # TTL index

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    def verify_password(self, password: str, hashed_password: str) -> bool:
        return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))

    def _hash_token(self, token: str) -> str:
        """SHA256 of the token, so raw tokens are never stored."""
        return hashlib.sha256(token.encode('utf-8')).hexdigest()

    def register_user(self, username: str, password: str) -> Dict[str, Any]:
        """
        Register a new user.

        Args:
            username: User's chosen username
            password: User's chosen password

        Returns:
            Dictionary with success status and message or error
        """
        if not username or not password:
            return {"success": False, "error": "Username and password are required"}

        username = username.strip().lower()  # Normalize username

        if len(username) < MIN_USERNAME_LENGTH:
            return {"success": False, "error": f"Username must be at least {MIN_USERNAME_LENGTH} characters long"}

        if len(password) < MIN_PASSWORD_LENGTH:
            return {"success": False, "error": f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"}

        user_doc = {
            "username": username,
            "password": self.hash_password(password),
            "created_at": datetime.datetime.utcnow(),
            "last_login": None,
        }

        try:
            result = self.users_collection.insert_one(user_doc)
        except DuplicateKeyError:
            return {"success": False, "error": "Username already exists"}

        return {
            "success": True,
            "message": "User registered successfully",
            "user_id": str(result.inserted_id)
        }

    def login_user(self, username: str, password: str) -> Dict[str, Any]:
        """
        Authenticate a user and issue a JWT token.

        Returns:
            Dictionary with success status and JWT token or error
        """
        if not username or not password:
            return {"success": False, "error": "Username and password are required"}

        user = self.users_collection.find_one({"username": username.strip().lower()})
        if not user or not self.verify_password(password, user["password"]):
            return {"success": False, "error": "Invalid username or password"}

        now = datetime.datetime.utcnow()
        expires_at = now + datetime.timedelta(days=self.expiration_days)
        user_id = str(user["_id"])

        token = jwt.encode(
            {"user_id": user_id, "username": user["username"], "exp": expires_at, "jti": uuid.uuid4().hex},
            self.jwt_secret,
            algorithm="HS256"
        )

        self.sessions_collection.insert_one({
            "user_id": user_id,
            "token_hash": self._hash_token(token),
            "created_at": now,
            "expires_at": expires_at
        })
        self.users_collection.update_one({"_id": user["_id"]}, {"$set": {"last_login": now}})

        return {
            "success": True,
            "token": token,
            "user": User.from_document(user).to_dict()
        }

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify a JWT token and check its session has not been logged out.

        Returns:
            Dictionary with success status and user data or error
        """
        if not token:
            return {"success": False, "error": "Token is required"}

        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            return {"success": False, "error": "Token has expired"}
        except jwt.InvalidTokenError:
            return {"success": False, "error": "Invalid token"}

        user_id = payload.get("user_id")
        if not user_id:
            return {"success": False, "error": "Invalid token payload"}

        session = self.sessions_collection.find_one({
            "user_id": user_id,
            "token_hash": self._hash_token(token),
            "expires_at": {"$gt": datetime.datetime.utcnow()}
        })
        if not session:
            return {"success": False, "error": "Session has expired or is invalid"}

        user = self.get_user_by_id(user_id)
        if not user:
            return {"success": False, "error": "User not found"}

        return {"success": True, "user": user.to_dict()}

    def logout_user(self, token: str) -> Dict[str, Any]:
        """Logout by removing the session behind ``token``."""
        if not token:
            return {"success": False, "error": "Token is required"}

        result = self.sessions_collection.delete_one({"token_hash": self._hash_token(token)})
        if result.deleted_count > 0:
            return {"success": True, "message": "Logged out successfully"}
        return {"success": False, "error": "Session not found or already expired"}

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        try:
            user = self.users_collection.find_one({"_id": ObjectId(user_id)})
        except InvalidId:
            return None
        return User.from_document(user) if user else None

    def get_active_sessions_count(self) -> int:
        return self.sessions_collection.count_documents({
            "expires_at": {"$gt": datetime.datetime.utcnow()}
        })
