import argparse
import json
import sys

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from trustcheck.analyzers.domain_analyzer import analyze_domain
from trustcheck.config import configure_logging
from trustcheck.errors import InvalidRequestError

console = Console()

STATUS_STYLE = {"safe": "bold green", "warning": "bold yellow", "danger": "bold red"}


def display_result(data: dict) -> None:
    status = data.get("status", "?")
    style = STATUS_STYLE.get(status, "bold")

    console.print(Panel(f"[bold yellow]DOMAIN:[/bold yellow] {data.get('domain')}", expand=False))
    console.print(f"[bold green]Trust score:[/bold green] {data.get('final_score')}/100")
    console.print(f"[{style}]Status: {status}[/{style}]")
    if data.get("cached"):
        console.print("[dim](cached result)[/dim]")
    console.print(f"\n{data.get('summary', '')}\n")

    table = Table(title="Checks", show_lines=True)
    table.add_column("Check", style="cyan", no_wrap=True)
    table.add_column("Score", justify="right", style="green")
    table.add_column("Weight", justify="right")
    table.add_column("Message", style="magenta")

    for check in data.get("checks", {}).values():
        score = "-" if check["score"] is None else str(check["score"])
        table.add_row(check["name"], score, f"{check['weight']:.2f}", escape(check["message"]))

    console.print(table)

    recommendations = data.get("recommendations", [])
    if recommendations:
        console.print("[bold]Recommendations:[/bold]")
        for rec in recommendations:
            console.print(f"  - {rec}")


def display_explain(data: dict) -> None:
    """Checks grouped by category with their details."""
    console.print(Panel(f"[bold blue]Explanation for {data.get('domain')}[/bold blue]", expand=False))

    root = Tree("[yellow]Trust Score Breakdown[/yellow]")

    categories = {}
    for check in data.get("checks", {}).values():
        categories.setdefault(check.get("category", "other").title(), []).append(check)

    for category, checks in sorted(categories.items()):
        cat_tree = root.add(f"[bold green]{category}[/bold green]")
        for check in checks:
            node = cat_tree.add(
                f"[cyan]{check['name']}[/cyan] → [white]score={check['score']} "
                f"risk={check['risk_level']}[/white]\n    [dim]{escape(check['message'])}[/dim]"
            )
            for factor in check.get("details", {}).get("risk_factors", []):
                if factor["detected"]:
                    node.add(f"[red]{factor['factor']}[/red] (+{factor['weight']} risk)")

    console.print(root)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Crypto scam / phishing domain trust scoring")
    parser.add_argument("target", help="Domain or URL to check")
    parser.add_argument(
        "-t",
        "--type",
        choices=["general", "crypto"],
        default="general",
        help="Request type; crypto also checks the exchange registry (default: general)",
    )
    parser.add_argument("--json", action="store_true", help="Output raw JSON instead of pretty tables")
    parser.add_argument("--explain", action="store_true", help="Show grouped breakdown of each check")
    parser.add_argument("--offline", action="store_true", help="Skip every network source")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")

    args = parser.parse_args(argv)

    if args.log_level:
        configure_logging(args.log_level.upper())
    else:
        configure_logging()

    try:
        result = analyze_domain(args.target, args.type, offline=args.offline)
    except InvalidRequestError as e:
        console.print(f"[bold red]Invalid input:[/bold red] {escape(str(e))}")
        return 2

    if args.json:
        console.print_json(json.dumps(result))
    else:
        display_result(result)
        if args.explain:
            display_explain(result)

    return 0


if __name__ == "__main__":
    sys.exit(main())
