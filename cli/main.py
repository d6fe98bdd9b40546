# cli/main.py
from typing import Optional

import click

from catalog.log import configure_logging
from catalog.sa import Database, SqlEntityStore
from catalog.services import CatalogHandler
from .commands.db import init_db, dashboard
from .commands.records import list_records, show, create, update, delete
from .commands.server import serve

def database_url(db: Optional[str]) -> Optional[str]:
    """Accept a full SQLAlchemy URL or a plain SQLite file path"""
    if db is None or '://' in db:
        return db
    return f"sqlite:///{db}"

class CatalogContext:
    """Lazily built database, store and handler shared by the commands"""

    def __init__(self, db: Optional[str] = None):
        self.url = database_url(db)
        self._database: Optional[Database] = None
        self._handler: Optional[CatalogHandler] = None

    @property
    def database(self) -> Database:
        if self._database is None:
            self._database = Database(self.url)
        return self._database

    @property
    def handler(self) -> CatalogHandler:
        if self._handler is None:
            self._handler = CatalogHandler(SqlEntityStore(self.database))
        return self._handler

@click.group()
@click.option('--db', default=None, help='Database URL or SQLite file path (default: DATABASE_URL or library.db)')
@click.option('--log-level', default=None, help='Logging level (default: LOG_LEVEL or INFO)')
@click.pass_context
def cli(ctx: click.Context, db: Optional[str], log_level: Optional[str]):
    """Local Library catalog CLI"""
    configure_logging(log_level)
    if ctx.obj is None:
        ctx.obj = CatalogContext(db)

cli.add_command(init_db)
cli.add_command(dashboard)
cli.add_command(list_records)
cli.add_command(show)
cli.add_command(create)
cli.add_command(update)
cli.add_command(delete)
cli.add_command(serve)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
