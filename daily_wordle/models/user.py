"""
User Data Models

Contains user-related data structures.
"""

from dataclasses import dataclass
from typing import Dict, Optional
from datetime import datetime


@dataclass
class User:
    """User data model."""
    id: str
    username: str
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Dict) -> "User":
        return cls(
            id=str(doc["_id"]),
            username=doc["username"],
            created_at=doc.get("created_at"),
            last_login=doc.get("last_login"),
        )

    def to_dict(self) -> Dict:
        return {"id": self.id, "username": self.username}
