import json
from typing import Optional

import requests
import typer

from config import settings
from utils.logging_utils import get_logger

logger = get_logger(__name__)

app = typer.Typer(help="Meeting session router demo server.")


def _default_server_url() -> str:
    return f"http://{settings.host}:{settings.port}"


def _post(server_url: str, path: str, params: dict) -> dict:
    url = server_url.rstrip("/") + path
    try:
        response = requests.post(url, params=params, timeout=30)
    except requests.RequestException as exc:
        logger.error("Request to %s failed: %s", url, exc)
        raise typer.Exit(code=1)
    try:
        body = response.json()
    except ValueError:
        body = {"error": response.text}
    if response.status_code >= 400:
        typer.echo(f"[error] {response.status_code}: {body.get('error', body)}", err=True)
        raise typer.Exit(code=1)
    return body


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address; defaults to HOST."),
    port: Optional[int] = typer.Option(None, help="Bind port; defaults to PORT."),
    reload: bool = typer.Option(False, help="Reload on code changes (development only)."),
):
    """
    Serve the index page and the /join and /end meeting actions.
    """
    import uvicorn

    bind_host = host or settings.host
    bind_port = port or settings.port
    logger.info("server running at http://%s:%s/", bind_host, bind_port)
    uvicorn.run("server.app:create_app", factory=True, host=bind_host, port=bind_port, reload=reload)


@app.command("join")
def join(
    title: str = typer.Option(..., help="Meeting title shared by everyone joining."),
    name: str = typer.Option(..., help="Attendee display name."),
    region: str = typer.Option("us-east-1", help="Media region hosting the meeting."),
    server_url: Optional[str] = typer.Option(None, help="Router base URL."),
):
    """
    Join (creating if needed) a meeting and print the JoinInfo JSON.
    """
    body = _post(server_url or _default_server_url(), "/join", {"title": title, "name": name, "region": region})
    typer.echo(json.dumps(body, indent=2))


@app.command("end")
def end(
    title: str = typer.Option(..., help="Meeting title to end."),
    server_url: Optional[str] = typer.Option(None, help="Router base URL."),
):
    """
    End a meeting. All attendee connections hang up.
    """
    _post(server_url or _default_server_url(), "/end", {"title": title})
    typer.echo(f"Meeting ended: {title}")


if __name__ == "__main__":
    app()
