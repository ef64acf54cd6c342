"""Terminal rendering for explorer results."""
import json
from typing import Any, List, Tuple

import click
from colorama import Fore, Style

from swagger_explorer.schema.models import ApiResponse, SearchMatch

METHOD_COLORS = {
    "GET": Fore.GREEN,
    "POST": Fore.YELLOW,
    "PUT": Fore.BLUE,
    "PATCH": Fore.MAGENTA,
    "DELETE": Fore.RED,
}


def dumps(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def print_header(title: str):
    """Print a section header."""
    click.echo(f"\n{Fore.CYAN}{'━' * 45}")
    click.echo(f"{Fore.CYAN}{title}")
    click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n")


def echo_services(services: List[Tuple[str, str]]):
    for name, url in services:
        click.echo(f"{Fore.CYAN}{name}{Style.RESET_ALL}: {url}")


def echo_endpoints(service: str, endpoints: List[Tuple[str, str, str]]):
    click.echo(f"{Fore.CYAN}Service: {service}{Style.RESET_ALL}")
    for method, path, summary in endpoints:
        color = METHOD_COLORS.get(method, Fore.WHITE)
        click.echo(f"{color}[{method}]{Style.RESET_ALL} {path} - {summary}")


def echo_matches(matches: List[SearchMatch]):
    if not matches:
        click.echo(f"{Fore.YELLOW}No matching APIs found.")
        return
    for match in matches:
        click.echo(match.to_line())


def echo_json(value: Any):
    click.echo(dumps(value))


def echo_response(response: ApiResponse):
    """Print a debug_endpoint result; errors in red"""
    if response.is_error:
        status = f"{response.status} {response.status_text}".strip() if response.status else "no response"
        click.echo(f"{Fore.RED}❌ {status}")
        if response.message:
            click.echo(f"{Fore.YELLOW}{response.message}")
    else:
        retried = " (after auto-login)" if response.retried else ""
        click.echo(f"{Fore.GREEN}✅ {response.status} {response.status_text}{retried}")
    if response.status is not None:
        click.echo(dumps(response.to_dict()))


def echo_error(error: Exception):
    click.echo(f"{Fore.RED}Error: {error}", err=True)
