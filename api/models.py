"""
API Request and Response Models.

Pydantic models for the action endpoint. Responses are the free-form records
produced by the sheet backend, so only the envelope is modelled here.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field


class ActionRequest(BaseModel):
    """POST body: an action name plus its payload."""
    action: Optional[str] = Field(
        None,
        description="Action name; the `action` query parameter is used when absent"
    )
    data: Optional[Dict[str, Any]] = Field(
        None,
        description="Action payload (entity fields, `{id}` for deletes, or a syncAll bag)"
    )
    id: Optional[Union[str, int]] = Field(
        None,
        description="Entity id for deletes sent without a `data` object"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "action": "addProduct",
                "data": {
                    "name": "HD CCTV Camera",
                    "category": "Cameras",
                    "price": 2500,
                    "stock": 25
                }
            }
        }

    def payload(self) -> Dict[str, Any]:
        data = dict(self.data or {})
        if "id" not in data and self.id is not None:
            data["id"] = str(self.id)
        return data


class HealthResponse(BaseModel):
    status: str
    version: str
    service: str
    sheets_backend: str
