"""
User CRUD operations.
"""
from typing import Any, Dict, List, Optional
import uuid
from sqlalchemy.orm import Session
from app.model.user import User, ROLE_MASTER
from app.crud.base import CRUDBase


class CRUDUser(CRUDBase[User, Dict[str, Any], Dict[str, Any]]):
    """User-specific CRUD operations."""

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return self.get_by_field(db, "email", email)

    def list_active_masters(self, db: Session, *, exclude_user_id: Optional[uuid.UUID] = None) -> List[User]:
        query = db.query(self.model).filter(
            self.model.role == ROLE_MASTER,
            self.model.is_active.is_(True),
        )
        if exclude_user_id:
            query = query.filter(self.model.id != exclude_user_id)
        return query.all()


user_crud = CRUDUser(User)
