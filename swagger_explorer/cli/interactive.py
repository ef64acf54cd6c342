"""Interactive shell for the explorer."""
import json
from typing import Any, Dict, Optional

import click
from colorama import Fore

from swagger_explorer.api.explorer import ApiExplorer
from swagger_explorer.exceptions import SwaggerExplorerError
from swagger_explorer.cli import output


class InteractiveCLI:
    """
    Menu-driven shell.

    All actions share one ApiExplorer, so documents stay cached and a token
    captured by one call (e.g. a login endpoint) is sent on the next ones.
    """

    def __init__(self, explorer: ApiExplorer):
        """Initialize CLI."""
        self.explorer = explorer
        self.current_service: Optional[str] = None
        self.actions = {
            1: ("List services", self.list_services),
            2: ("Select service", self.select_service),
            3: ("List endpoints", self.list_endpoints),
            4: ("Search APIs", self.search),
            5: ("Endpoint details", self.details),
            6: ("Debug endpoint", self.debug),
            7: ("Generate interface", self.interface),
            8: ("Generate curl", self.curl),
            9: ("Refresh docs", self.refresh),
        }

    def run(self):
        """Run interactive CLI."""
        exit_choice = len(self.actions) + 1
        while True:
            output.print_header(f"Main Menu (service: {self.current_service or 'auto'})")
            for number, (label, _) in self.actions.items():
                click.echo(f"{number}. {label}")
            click.echo(f"{exit_choice}. Exit\n")

            choice = click.prompt("Choose", type=int, default=3)

            if choice == exit_choice:
                click.echo(f"{Fore.YELLOW}Goodbye!")
                break
            if choice not in self.actions:
                click.echo(f"{Fore.RED}Invalid choice")
                continue

            label, action = self.actions[choice]
            output.print_header(label)
            try:
                action()
            except SwaggerExplorerError as e:
                output.echo_error(e)

    def list_services(self):
        output.echo_services(self.explorer.list_services())

    def select_service(self):
        names = [name for name, _ in self.explorer.list_services()]
        for i, name in enumerate(names, 1):
            click.echo(f"{i}. {name}")
        choice = click.prompt("Select service (0 = auto)", type=int, default=0)
        if 1 <= choice <= len(names):
            self.current_service = names[choice - 1]
        elif choice == 0:
            self.current_service = None
        else:
            click.echo(f"{Fore.RED}Invalid choice")

    def list_endpoints(self):
        output.echo_endpoints(*self.explorer.list_endpoints(self.current_service))

    def search(self):
        query = click.prompt("Keywords")
        output.echo_matches(self.explorer.search_apis(query, self.current_service))

    def details(self):
        path, method = self._prompt_endpoint()
        output.echo_json(self.explorer.get_endpoint_details(path, method, self.current_service))

    def debug(self):
        path, method = self._prompt_endpoint()
        response = self.explorer.debug_endpoint(path, method, self.current_service, **self._prompt_request())
        output.echo_response(response)

    def interface(self):
        path, method = self._prompt_endpoint()
        style = click.prompt("Style", type=click.Choice(["typescript", "python"]), default="typescript")
        click.echo(self.explorer.generate_interface(path, method, self.current_service, style=style))

    def curl(self):
        path, method = self._prompt_endpoint()
        click.echo(self.explorer.generate_curl(path, method, self.current_service, **self._prompt_request()))

    def refresh(self):
        name, title = self.explorer.refresh_docs(self.current_service)
        click.echo(f"{Fore.GREEN}✅ Successfully refreshed documentation for '{name}'. Title: {title}")

    def _prompt_endpoint(self):
        path = click.prompt("Path (e.g. /users/{id})")
        method = click.prompt("Method", default="get")
        return path, method

    def _prompt_request(self) -> Dict[str, Any]:
        return {
            "path_params": self._prompt_json("Path params (JSON)"),
            "query_params": self._prompt_json("Query params (JSON)"),
            "headers": self._prompt_json("Headers (JSON)"),
            "body": self._prompt_json("Body (JSON)"),
        }

    @staticmethod
    def _prompt_json(label: str) -> Any:
        while True:
            raw = click.prompt(label, default="", show_default=False)
            if not raw.strip():
                return None
            try:
                return json.loads(raw)
            except json.JSONDecodeError as e:
                click.echo(f"{Fore.RED}Invalid JSON: {e}")
