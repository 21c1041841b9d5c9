"""
FastAPI dependencies shared by the v1 endpoints.

The ``UserService`` instance is created by ``create_app`` and stored on
``app.state`` so that each application (and each test) has its own
store.  Endpoints receive it through ``get_user_service``.
"""

from fastapi import Request

from ..services.user_service import UserService


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service
