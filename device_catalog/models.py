from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class DeviceNameRequest(BaseModel):
    retail_branding: str = Field(..., description="Brand as sold, any case")
    model: str = Field(..., description="Manufacturer model identifier, any case")


class DeviceNameResponse(BaseModel):
    data: str


class LoginRequest(BaseModel):
    username: str
    password: str


class UpdateDevicesResponse(BaseModel):
    status: str
    message: str
    summary: dict[str, Any]
