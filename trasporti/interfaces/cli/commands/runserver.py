"""
Run the HTTP API with uvicorn
"""

import uvicorn

from trasporti.core.config import get_settings
from .base import BaseCommand


class Command(BaseCommand):
    description = "Start the API server"

    def add_arguments(self, parser):
        parser.add_argument('--host', help='Bind address (default: HOST)')
        parser.add_argument('--port', type=int, help='Port (default: PORT, 3001)')
        parser.add_argument('--reload', action='store_true', help='Reload on code changes')

    def handle(self, **kwargs):
        settings = get_settings()
        host = kwargs.get('host') or settings.HOST
        port = kwargs.get('port') or settings.PORT

        self.print_info(f"Starting server on {host}:{port}")
        uvicorn.run(
            "trasporti.main:create_application",
            factory=True,
            host=host,
            port=port,
            reload=kwargs.get('reload') or settings.DEBUG,
            log_level="debug" if settings.DEBUG else "info",
        )
