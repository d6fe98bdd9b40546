import os

import click
import uvicorn

@click.command()
@click.option('--host', default="127.0.0.1", help='Interface to bind')
@click.option('--port', default=8000, type=int, help='Port to listen on')
@click.option('--reload/--no-reload', default=False, help='Restart on code changes')
@click.pass_obj
def serve(obj, host: str, port: int, reload: bool):
    """Run the catalog HTTP API with uvicorn"""
    if obj.url:
        # api.main builds its database from the environment
        os.environ["DATABASE_URL"] = obj.url
    click.echo(click.style(f"Serving catalog on http://{host}:{port}/catalog/", fg='green'))
    uvicorn.run("api.main:app", host=host, port=port, reload=reload)
