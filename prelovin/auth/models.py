from typing import Optional
from pydantic import BaseModel

from ..schemas.user import UpsertUser


class TokenData(BaseModel):
    """Caller identity taken from the identity provider's token claims."""
    user_id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None

    def to_upsert(self) -> UpsertUser:
        claims = self.model_dump(exclude={"user_id"}, exclude_none=True)
        return UpsertUser(id=self.user_id, **claims)

