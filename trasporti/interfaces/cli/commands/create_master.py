"""
Seed the admin user from MASTER_USERNAME / MASTER_PASSWORD
"""

import asyncio

from trasporti.core.config import get_settings
from trasporti.core.logging import setup_logging
from trasporti.infrastructure.db.connection import DatabaseManager
from trasporti.services import AuthService
from .base import BaseCommand


class Command(BaseCommand):
    description = "Create the admin user from MASTER_USERNAME / MASTER_PASSWORD"

    def handle(self, **kwargs):
        settings = get_settings()
        setup_logging(settings)

        user = asyncio.run(self._seed(settings))
        if user is None:
            self.print_warning("MASTER_USERNAME and MASTER_PASSWORD must be set")
        else:
            self.print_success(f"Admin user ready: {user}")

    async def _seed(self, settings):
        database = DatabaseManager(settings.database)
        await database.connect()
        try:
            with database.get_session() as session:
                user = await AuthService(session, settings).seed_master()
                return user.username if user else None
        finally:
            await database.disconnect()
