"""User repository - Database operations for users, time intervals and schedulings"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Scheduling, User, UserTimeInterval


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        """Update a user with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(user, key):
                setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def replace_time_intervals(db: Session, user_id: str, intervals: list[dict]) -> list[UserTimeInterval]:
        """Swap the user's weekly intervals for a new set"""
        db.query(UserTimeInterval).filter(UserTimeInterval.user_id == user_id).delete()
        rows = [UserTimeInterval(user_id=user_id, **interval) for interval in intervals]
        db.add_all(rows)
        db.commit()
        return rows

    @staticmethod
    def get_scheduling_at(db: Session, user_id: str, date: datetime) -> Optional[Scheduling]:
        return (
            db.query(Scheduling)
            .filter(Scheduling.user_id == user_id, Scheduling.date == date)
            .first()
        )

    @staticmethod
    def create_scheduling(db: Session, user_id: str, **scheduling_data) -> Scheduling:
        scheduling = Scheduling(user_id=user_id, **scheduling_data)
        db.add(scheduling)
        db.commit()
        db.refresh(scheduling)
        return scheduling
