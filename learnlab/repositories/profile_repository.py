from typing import Optional

from sqlalchemy.orm import Session

from learnlab.models.user import UserProfile


class ProfileRepository:
    """Repository for UserProfile database operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user_id(self, user_id: int) -> Optional[UserProfile]:
        return self.db.query(UserProfile).filter(UserProfile.user_id == user_id).first()

    def upsert(self, user_id: int, bio: str, phone: str) -> UserProfile:
        """Create the profile on first write, update it afterwards"""
        profile = self.get_by_user_id(user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id)
            self.db.add(profile)
        profile.bio = bio
        profile.phone = phone
        self.db.commit()
        self.db.refresh(profile)
        return profile
