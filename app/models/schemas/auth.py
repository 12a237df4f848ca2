"""Response envelopes for the member endpoints."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class MessageOut(BaseModel):
    status: Literal["success", "failure"] = "success"
    message: str
