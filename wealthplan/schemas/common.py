"""Pydantic schemas shared across endpoints."""

from typing import Dict

from pydantic import BaseModel


class PingResponse(BaseModel):
    message: str


class FieldErrorsResponse(BaseModel):
    errors: Dict[str, str]
