from pydantic import BaseModel, Field

ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"
TX_HASH_PATTERN = r"^0x[a-fA-F0-9]{64}$"


class VerifyPaymentIn(BaseModel):
    tx_hash: str = Field(..., pattern=TX_HASH_PATTERN)
    expected_recipient: str = Field(..., pattern=ADDRESS_PATTERN)
    expected_amount: str = Field(..., min_length=1)
    expected_sender: str = Field(..., pattern=ADDRESS_PATTERN)


class RecordPaymentIn(BaseModel):
    content_id: str = Field(..., min_length=1)
    payer: str = Field(..., pattern=ADDRESS_PATTERN)
    tx_hash: str = Field(..., pattern=TX_HASH_PATTERN)
    amount: str = Field(..., min_length=1)
    timestamp: int


class CheckPaymentIn(BaseModel):
    content_id: str = Field(..., min_length=1)
    payer: str = Field(..., pattern=ADDRESS_PATTERN)


class CheckPaymentOut(BaseModel):
    has_paid: bool
    amount: str | None = None
    timestamp: int | None = None
    tx_hash: str | None = None
