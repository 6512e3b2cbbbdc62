from fastapi import Request

from .storage import Storage


def get_storage(request: Request) -> Storage:
    """Return the storage backend bound to the running application."""
    return request.app.state.storage
