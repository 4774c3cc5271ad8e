from pydantic import BaseModel, Field

from accessgate.schemas.payments import ADDRESS_PATTERN


class ResolveAccessIn(BaseModel):
    content_id: str = Field(..., min_length=1)
    identity: str = Field(..., pattern=ADDRESS_PATTERN)
