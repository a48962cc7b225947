from typing import Optional

from fastapi import status
from starlette.background import BackgroundTasks

from libs.result import Error


class ClientError(Exception):
    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        background: Optional[BackgroundTasks] = None,
    ):
        self.base_error = base_error
        self.status_code = status_code
        # Audit writes scheduled before the error still run after the response
        self.background = background
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error, background: Optional[BackgroundTasks] = None):
        self.base_error = base_error
        self.background = background
        super().__init__(base_error.message)
