#!/usr/bin/env python3
"""Swagger Explorer - Entry point."""
import json
import logging
import os
import sys

import click
from colorama import Fore, Style, init

from config import AppConfig, split_service_list
from swagger_explorer.api.explorer import ApiExplorer
from swagger_explorer.cli import output
from swagger_explorer.cli.interactive import InteractiveCLI
from swagger_explorer.exceptions import SwaggerExplorerError

# Initialize colorama
init(autoreset=True)


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Swagger Explorer{Fore.CYAN}                     ║")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Browse, inspect and debug OpenAPI{Fore.CYAN}    ║")
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    click.echo()


def parse_pairs(ctx, param, values):
    """click callback: turn ("k=v", ...) into a dict."""
    result = {}
    for item in values:
        if "=" not in item:
            raise click.BadParameter(f"expected key=value, got '{item}'")
        key, value = item.split("=", 1)
        result[key] = value
    return result or None


def parse_body(ctx, param, value):
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e}")


def request_options(func):
    """Options shared by `debug` and `curl`."""
    func = click.option("--body", callback=parse_body, help="JSON request body")(func)
    func = click.option("--header", "-H", "headers", multiple=True, callback=parse_pairs,
                        help="Header as key=value (repeatable)")(func)
    func = click.option("--query", "-q", "query_params", multiple=True, callback=parse_pairs,
                        help="Query parameter as key=value (repeatable)")(func)
    func = click.option("--path-param", "-p", "path_params", multiple=True, callback=parse_pairs,
                        help="Path parameter as key=value (repeatable)")(func)
    return func


def service_option(func):
    return click.option("--service", "-s", default=None, help="Service name (optional with one service)")(func)


def run(call):
    """Run an explorer call, turning lookup/fetch errors into exit code 1."""
    try:
        return call()
    except SwaggerExplorerError as e:
        output.echo_error(e)
        sys.exit(1)


@click.group()
@click.version_option(version="2.0.0")
@click.option("--doc", "-d", "services", multiple=True,
              help="Service as name=url, or a bare document URL (repeatable; default: $SWAGGER_SERVICES)")
@click.option("--user", envvar="SWAGGER_AUTH_USER", default=None, help="Username for auto-login")
@click.option("--password", envvar="SWAGGER_AUTH_PASS", default=None, help="Password for auto-login")
@click.option("--login-path", envvar="SWAGGER_LOGIN_PATH", default=None,
              help="Login endpoint path (enables automatic login on 401)")
@click.option("--timeout", envvar="SWAGGER_TIMEOUT", type=int, default=None, help="HTTP timeout in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx, services, user, password, login_path, timeout, verbose):
    """Swagger Explorer - Discover, inspect and invoke OpenAPI endpoints.

    Register services with --doc name=url (or one bare document URL).
    """
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not services:
        services = split_service_list(os.getenv("SWAGGER_SERVICES"))
    config = AppConfig.from_args(services, user=user, password=password, login_path=login_path, timeout=timeout)
    ctx.obj = ApiExplorer.from_config(config)


@cli.command("services")
@click.pass_obj
def list_services(explorer):
    """List configured services."""
    output.echo_services(explorer.list_services())


@cli.command()
@service_option
@click.pass_obj
def refresh(explorer, service):
    """Force refresh of the cached documentation."""
    name, title = run(lambda: explorer.refresh_docs(service))
    click.echo(f"{Fore.GREEN}Successfully refreshed documentation for '{name}'. Title: {title}")


@cli.command()
@service_option
@click.pass_obj
def endpoints(explorer, service):
    """List all available API endpoints."""
    output.echo_endpoints(*run(lambda: explorer.list_endpoints(service)))


@cli.command()
@click.argument("query")
@service_option
@click.option("--limit", default=50, show_default=True)
@click.pass_obj
def search(explorer, query, service, limit):
    """Search for APIs by keyword."""
    output.echo_matches(run(lambda: explorer.search_apis(query, service, limit=limit)))


@cli.command()
@click.argument("path")
@click.argument("method")
@service_option
@click.pass_obj
def details(explorer, path, method, service):
    """Show fully resolved details of an endpoint."""
    output.echo_json(run(lambda: explorer.get_endpoint_details(path, method, service)))


@cli.command()
@click.argument("path")
@click.argument("method")
@service_option
@request_options
@click.pass_obj
def debug(explorer, path, method, service, path_params, query_params, headers, body):
    """Execute a real HTTP request against the API."""
    response = run(lambda: explorer.debug_endpoint(
        path, method, service,
        path_params=path_params,
        query_params=query_params,
        headers=headers,
        body=body,
    ))
    output.echo_response(response)


@cli.command()
@click.argument("path")
@click.argument("method")
@service_option
@click.option("--style", type=click.Choice(["typescript", "python"]), default="typescript", show_default=True)
@click.pass_obj
def interface(explorer, path, method, service, style):
    """Generate request/response type declarations."""
    click.echo(run(lambda: explorer.generate_interface(path, method, service, style=style)))


@cli.command()
@click.argument("path")
@click.argument("method")
@service_option
@request_options
@click.pass_obj
def curl(explorer, path, method, service, path_params, query_params, headers, body):
    """Generate a cURL command."""
    click.echo(run(lambda: explorer.generate_curl(
        path, method, service,
        path_params=path_params,
        query_params=query_params,
        headers=headers,
        body=body,
    )))


@cli.command()
@click.pass_obj
def shell(explorer):
    """Interactive shell (one session across calls)."""
    print_banner()
    InteractiveCLI(explorer).run()


if __name__ == "__main__":
    cli()
