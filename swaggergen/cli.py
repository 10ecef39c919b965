import logging
from importlib.metadata import PackageNotFoundError, version as package_version
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from swaggergen.codegen.codegen import Codegen
from swaggergen.config import get_config
from swaggergen.exceptions import SwaggerGenError

console = Console()
app = typer.Typer(
    name='swaggergen',
    help='Generate Python API client modules from OpenAPI/Swagger documents',
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(message)s',
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def generate(
    input: Annotated[
        str | None,
        typer.Option('--input', '-i', help='Path or URL to the OpenAPI/Swagger document'),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option('--output', '-o', help='Output directory for the generated client'),
    ] = None,
    base_url: Annotated[
        str | None,
        typer.Option('--base-url', '-b', help='Base URL overriding the document servers'),
    ] = None,
    enable_logging: Annotated[
        bool | None,
        typer.Option(
            '--enable-logging/--no-enable-logging',
            help='Log every request made by the generated client',
        ),
    ] = None,
    timeout: Annotated[
        int | None,
        typer.Option('--timeout', min=1, help='Request timeout in milliseconds'),
    ] = None,
    retries: Annotated[
        int | None,
        typer.Option('--retries', min=0, help='Connection retries of the generated client'),
    ] = None,
    clean: Annotated[
        bool | None,
        typer.Option('--clean/--no-clean', help='Empty the output directory first'),
    ] = None,
    config: Annotated[
        str | None,
        typer.Option(
            '--config', '-c', help='Path to configuration file (YAML or JSON)'
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Show debug logging')
    ] = False,
) -> None:
    """Generate a Python client package from an API document.

    Options given on the command line override the configuration file,
    which is looked up in the current directory when --config is omitted.

    Examples:
        swaggergen generate -i ./openapi.yaml
        swaggergen generate -i https://api.example.com/openapi.json -o ./client
        swaggergen generate --config swaggergen.yaml --clean
    """
    _configure_logging(verbose)

    overrides = {
        'input': input,
        'output': output,
        'base_url': base_url,
        'enable_logging': enable_logging,
        'timeout': timeout,
        'retries': retries,
        'clean': clean,
    }

    try:
        options = get_config(config)
        options = options.model_copy(
            update={key: value for key, value in overrides.items() if value is not None}
        )

        with Progress(
            SpinnerColumn(),
            TextColumn('[progress.description]{task.description}'),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task(
                f'Generating client for {options.input} in {options.output}...',
                total=None,
            )

            result = Codegen(options).generate()

            progress.update(task, description='Code generation completed!')

    except SwaggerGenError as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        raise typer.Exit(1)

    console.print(
        f'[green]Generated {len(result.service_files)} services with '
        f'{result.total_endpoints} endpoints[/green] in {result.output_dir}'
    )
    console.print('[dim]Service files:[/dim]')
    for service_file in result.service_files:
        console.print(f'  - {result.output_dir}/{service_file}')


@app.command()
def version() -> None:
    """Show the version of swaggergen."""
    try:
        console.print(f'swaggergen version: {package_version("swaggergen")}')
    except PackageNotFoundError:
        console.print('swaggergen version: unknown')


if __name__ == '__main__':
    app()
