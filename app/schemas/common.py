from typing import List, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True

class MessageResponse(CamelModel):
    success: bool = True
    message: str

class ErrorResponse(CamelModel):
    success: bool = False
    message: str
    error: str
    # Only set for request validation failures
    fields: Optional[List[str]] = None
