from __future__ import annotations

from ticket_metrics.api_server import create_app
from ticket_metrics.config import Settings
from ticket_metrics.handler import create_handler
from ticket_metrics.logging_config import setup_logging
from ticket_metrics.store import build_store_writer

settings = Settings.from_env()
setup_logging(settings.log_level, environment=settings.environment)

# One store client per process, shared by every request.
writer = build_store_writer(settings)

app = create_app(writer=writer, settings=settings)
handler = create_handler(writer, settings)
