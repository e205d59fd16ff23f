from pydantic import BaseModel, Field

HASH_PATTERN = r"^[0-9a-fA-F]{64}$"


class CompareRequest(BaseModel):
    previous_hash: str = Field(..., pattern=HASH_PATTERN, description="Digest of the earlier CV")
    current_hash: str = Field(..., pattern=HASH_PATTERN, description="Digest of the newer CV")
