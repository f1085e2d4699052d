import json
import logging
import sys
from typing import List, Optional

import typer

from reqbridge.application.use_cases.emit_client_code import DEFAULT_FUNCTION_NAME, CodeEmitter
from reqbridge.application.use_cases.execute_request import RequestExecutor
from reqbridge.config import settings
from reqbridge.domain.entities.outbound_response import ExecutionError
from reqbridge.domain.errors import ConfigurationError
from reqbridge.infrastructure.adapters.http.factory import build_transport
from reqbridge.infrastructure.web.response_builder import ResponseBuilder

app = typer.Typer(help="reqbridge: run outbound HTTP calls or emit them as browser code")


def _body(data: Optional[str], json_body: Optional[str]) -> object:
    if data is not None and json_body is not None:
        raise typer.BadParameter("use either --data or --json, not both")
    if json_body is not None:
        try:
            return json.loads(json_body)
        except ValueError as e:
            raise typer.BadParameter(f"--json is not valid JSON: {e}")
    return data


def _options(timeout: Optional[float], follow: bool) -> dict[str, object]:
    options: dict[str, object] = {}
    if timeout is not None:
        options["timeout"] = timeout
    if follow:
        options["follow_redirects"] = True
    return options


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v")) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else settings.log_level, stream=sys.stderr)


@app.command()
def fetch(
    method: str,
    url: str,
    header: List[str] = typer.Option([], "--header", "-H", help='"Name: value", repeatable'),
    data: Optional[str] = typer.Option(None, "--data", "-d"),
    json_body: Optional[str] = typer.Option(None, "--json"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t"),
    follow: bool = typer.Option(False, "--follow", "-L"),
    engine: str = typer.Option(settings.engine, "--engine"),
) -> None:
    executor = RequestExecutor(build_transport(engine, settings.http_timeout))
    try:
        result = executor.execute(method, url, header, _body(data, json_body), _options(timeout, follow))
    except ConfigurationError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)
    if isinstance(result, ExecutionError):
        typer.echo(result.message, err=True)
        raise typer.Exit(code=1)
    typer.echo(result.status_line, err=True)
    if isinstance(result.body, str):
        typer.echo(result.body)
    else:
        typer.echo(json.dumps(result.body, indent=2))


@app.command()
def emit(
    method: str,
    url: str,
    header: List[str] = typer.Option([], "--header", "-H", help='"Name: value", repeatable'),
    data: Optional[str] = typer.Option(None, "--data", "-d"),
    json_body: Optional[str] = typer.Option(None, "--json"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t"),
    name: str = typer.Option(DEFAULT_FUNCTION_NAME, "--name", "-n"),
) -> None:
    try:
        code = CodeEmitter(name).emit(method, url, header, _body(data, json_body), _options(timeout, False))
    except ConfigurationError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)
    typer.echo(code)


@app.command()
def status(code: int, message: Optional[str] = typer.Option(None, "--message", "-m")) -> None:
    builder = ResponseBuilder()
    try:
        builder.resolve_message(code, message)
    except ConfigurationError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)
    typer.echo(builder.context.status_line)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
) -> None:
    import uvicorn

    uvicorn.run("reqbridge.presentation.api.main:app", host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    app()
