from __future__ import annotations

from pydantic import BaseModel


class CounterState(BaseModel):
    counter: int
