from pydantic import BaseModel


class UserPublic(BaseModel):
    """Public identity fields attached to events and reviews"""

    id: str
    name: str | None = None
    image: str | None = None

    model_config = {"from_attributes": True}
