from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from uuid import UUID


class NocForm(BaseModel):
    model_config = ConfigDict(extra="ignore")

    dental_council_name: Optional[str] = None
    postal_address: Optional[str] = None


class NocApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    dental_council_name: str
    postal_address: str
    documents: Dict[str, str]
    created_at: datetime


class NocCreateResponse(BaseModel):
    success: bool = True
    message: str
    data: NocApplicationResponse


class NocListResponse(BaseModel):
    success: bool = True
    data: List[NocApplicationResponse]
