from __future__ import annotations

from fastapi import Request

from ..core.config import AppSettings
from ..services.counter import CounterStore
from ..services.users import UserDirectory


def get_app_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_users(request: Request) -> UserDirectory:
    return request.app.state.users


def get_counter(request: Request) -> CounterStore:
    return CounterStore(request.session)
