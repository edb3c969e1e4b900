"""Request-scoped access to the application's services."""

from fastapi import Request

from etlgraph.services import Services


def get_services(request: Request) -> Services:
    return request.app.state.services
