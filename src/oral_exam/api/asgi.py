"""ASGI entrypoint for the oral examination API.

Serve ``oral_exam.api.asgi:app`` with any ASGI server.
"""

from oral_exam.api.app import create_app
from oral_exam.containers import build_container

app = create_app(build_container())
