from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps.services import get_counter
from ..schemas.counter import CounterState
from ..services.counter import CounterStore

router = APIRouter(prefix="/api/counter", tags=["counter"])


@router.get("", response_model=CounterState)
def read_counter(store: CounterStore = Depends(get_counter)):
    return CounterState(counter=store.counter)


@router.post("/increase", response_model=CounterState)
def increase_counter(store: CounterStore = Depends(get_counter)):
    return CounterState(counter=store.increase())


@router.post("/reset", response_model=CounterState)
def reset_counter(store: CounterStore = Depends(get_counter)):
    return CounterState(counter=store.reset())
