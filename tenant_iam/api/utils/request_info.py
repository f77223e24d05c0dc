from typing import Optional

from fastapi import Request


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def user_agent(request: Request) -> Optional[str]:
    return request.headers.get("user-agent")
