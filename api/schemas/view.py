# api/schemas/view.py
from typing import Any, Dict
from pydantic import BaseModel

class ViewResponse(BaseModel):
    view: str
    context: Dict[str, Any]
