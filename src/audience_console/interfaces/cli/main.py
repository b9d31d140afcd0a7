# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""CLI interface for the Audience Console."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ...analysis.results import format_count, sort_audiences
from ...clients.llm_client import TextGenerationClient
from ...clients.meta_client import MetaAdsClient
from ...config.settings import configure_logging, settings
from ...errors import AuthenticationError, GenerationError, UpstreamError, ValidationError
from ...estimation.modifiers import compute_modifiers
from ...estimation.reach import estimate_table_reach
from ...estimation.transformer import transform_audience, transform_interest_details
from ...flows.search_flow import SearchFlow, SearchOutcome, SearchStatus
from ...models.analysis import AnalysisResult
from ...models.audience import FilterSet
from ...state import AppState

app = typer.Typer(
    name="audience-console",
    help="Audience research CLI - search interests, estimate reach and analyze selections",
    no_args_is_help=True,
)
console = Console()


def _create_meta_client() -> MetaAdsClient:
    """Create Meta client from settings."""
    return MetaAdsClient(
        base_url=settings.meta_graph_base_url,
        access_token=settings.meta_access_token,
        country=settings.target_country,
        search_limit=settings.meta_search_limit,
        locale=settings.meta_locale,
        timeout=settings.http_timeout,
    )


def _create_llm_client() -> TextGenerationClient:
    """Create text generation client from settings."""
    return TextGenerationClient(
        model=settings.default_llm_model,
        api_key=settings.anthropic_api_key,
        temperature=settings.llm_temperature,
        response_max_tokens=settings.llm_response_max_tokens,
        suggestion_max_tokens=settings.llm_suggestion_max_tokens,
        analysis_max_tokens=settings.llm_analysis_max_tokens,
    )


def _create_state(token: Optional[str], filters: FilterSet) -> AppState:
    """Build a session, connecting with the given token or the configured one."""
    state = AppState(filters=filters)
    try:
        state.auth.login(token or settings.meta_access_token)
    except AuthenticationError:
        console.print(
            "[red]No access token.[/red] Pass --token or set META_ACCESS_TOKEN."
        )
        raise typer.Exit(1)
    return state


def _filters(
    gender: str, age: str, budget: str, objective: str, placement: str
) -> FilterSet:
    """Build filters from the command options, exiting on invalid values."""
    filters = FilterSet(location=settings.target_country, age=age)
    changes = {"gender": gender, "budget": budget, "objective": objective, "placement": placement}
    try:
        for name, value in changes.items():
            filters = filters.with_change(name, value)
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    return filters


def _spinner(description: str) -> Progress:
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    )
    progress.add_task(description, total=None)
    return progress


async def _run_search(state: AppState, terms: list[str]) -> SearchOutcome:
    client = _create_meta_client()
    try:
        flow = SearchFlow(client, state=state, country=settings.target_country)
        return await flow.search(terms)
    finally:
        await client.close()


def _search_or_exit(state: AppState, terms: list[str]) -> SearchOutcome:
    with _spinner(f"Searching interests for {', '.join(terms)}..."):
        outcome = asyncio.run(_run_search(state, terms))

    if outcome.status in (SearchStatus.INVALID, SearchStatus.FAILED):
        console.print(f"[red]Error:[/red] {outcome.error}")
        raise typer.Exit(1)
    if outcome.status == SearchStatus.EMPTY:
        console.print(Panel(outcome.message or "", title="No audiences found"))
    return outcome


GENDER_OPTION = typer.Option("all", "--gender", "-g", help="all, male or female")
AGE_OPTION = typer.Option("18-24", "--age", "-a", help="Age range, e.g. 25-34 or 65-99")
BUDGET_OPTION = typer.Option("10", "--budget", "-b", help="Daily budget in USD")
OBJECTIVE_OPTION = typer.Option(
    "CONVERSIONS",
    "--objective",
    help="AWARENESS, CONVERSIONS, TRAFFIC, ENGAGEMENT, APP_PROMOTION, LEAD_GENERATION",
)
PLACEMENT_OPTION = typer.Option(
    "automatic",
    "--placement",
    "-p",
    help="automatic, facebook, instagram, messenger, whatsapp",
)
TOKEN_OPTION = typer.Option(None, "--token", "-t", help="Meta access token")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Audience Console."""
    configure_logging(log_level)


@app.command()
def search(
    terms: list[str] = typer.Argument(..., help="Interest search terms"),
    gender: str = GENDER_OPTION,
    age: str = AGE_OPTION,
    budget: str = BUDGET_OPTION,
    objective: str = OBJECTIVE_OPTION,
    placement: str = PLACEMENT_OPTION,
    sort: str = typer.Option(
        "size", "--sort", "-s", help="Sort by size or estimated_reach"
    ),
    ascending: bool = typer.Option(False, "--asc", help="Sort ascending"),
    token: Optional[str] = TOKEN_OPTION,
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Save results to JSON file",
    ),
) -> None:
    """Search targeting interests and rank them by size or reach."""
    filters = _filters(gender, age, budget, objective, placement)
    state = _create_state(token, filters)
    outcome = _search_or_exit(state, terms)
    if not outcome.audiences:
        return

    audiences = sort_audiences(
        outcome.audiences,
        "estimated_reach" if sort == "estimated_reach" else "size",
        "asc" if ascending else "desc",
        filters.budget,
    )

    table = Table(title=f"Results ({len(audiences)} audiences)")
    table.add_column("ID", style="dim")
    table.add_column("Interest", style="cyan")
    table.add_column("Path")
    table.add_column("Size", justify="right", style="green")
    table.add_column("Est. Reach", justify="right", style="magenta")
    table.add_column("Table Reach", justify="right")

    for audience in audiences:
        table.add_row(
            audience.id,
            audience.name[:30],
            audience.path[:40],
            format_count(audience.size),
            f"{audience.estimated_reach:,}",
            f"{estimate_table_reach(audience, filters.budget):,}",
        )

    console.print(table)

    if output:
        with open(output, "w") as f:
            json.dump(
                [a.model_dump(by_alias=True) for a in audiences], f, indent=2, default=str
            )
        console.print(f"\n[green]Results saved to {output}[/green]")


@app.command()
def details(
    interest_id: str = typer.Argument(..., help="Interest ID"),
    token: Optional[str] = TOKEN_OPTION,
) -> None:
    """Show demographic and behavior stats for one interest."""
    state = _create_state(token, FilterSet())

    async def fetch() -> dict:
        client = _create_meta_client()
        try:
            return await client.get_interest_details(
                interest_id, access_token=state.auth.access_token
            )
        finally:
            await client.close()

    with _spinner("Fetching interest details..."):
        try:
            raw = asyncio.run(fetch())
        except (UpstreamError, ValidationError) as e:
            console.print(f"[red]Error fetching interest details:[/red] {e}")
            raise typer.Exit(1)

    info = transform_interest_details(raw)
    console.print(
        Panel(
            f"[bold]Name:[/bold] {info.name}\n"
            f"[bold]Size:[/bold] {format_count(info.size or 0)}\n"
            f"[bold]Path:[/bold] {info.path}\n"
            f"[bold]Description:[/bold] {info.description}",
            title="Interest Details",
        )
    )

    for category, stats in info.demographics.items():
        table = Table(title=category.title())
        table.add_column("Segment", style="cyan")
        table.add_column("Share", justify="right")
        for stat in stats:
            table.add_row(stat.label, str(stat.percentage))
        console.print(table)

    for group in info.behaviors:
        names = ", ".join(str(b.get("name")) for b in group.behaviors)
        console.print(f"[bold]{group.category}:[/bold] {names}")

    if info.related_interests:
        console.print("\n[bold]Related Interests:[/bold]")
        for related in info.related_interests:
            console.print(f"  - {related.name} ({format_count(related.size or 0)})")


@app.command()
def estimate(
    lower: int = typer.Argument(..., help="Audience size lower bound"),
    upper: int = typer.Argument(..., help="Audience size upper bound"),
    gender: str = GENDER_OPTION,
    age: str = AGE_OPTION,
    budget: str = BUDGET_OPTION,
    objective: str = OBJECTIVE_OPTION,
    placement: str = PLACEMENT_OPTION,
) -> None:
    """Estimate adjusted audience size and reach from platform bounds."""
    filters = _filters(gender, age, budget, objective, placement)
    modifiers = compute_modifiers(filters)
    audience = transform_audience(
        {
            "id": "estimate",
            "name": "Estimate",
            "audience_size_lower_bound": lower,
            "audience_size_upper_bound": upper,
        },
        filters,
        settings.target_country,
    )

    console.print(
        Panel(
            f"[bold]Size modifier:[/bold] {modifiers.size_modifier:.3f}\n"
            f"[bold]CPM modifier:[/bold] {modifiers.cpm_modifier:.2f}\n"
            f"[bold]Adjusted size:[/bold] {audience.size:,}\n"
            f"[bold]Est. daily reach:[/bold] {audience.estimated_reach:,}\n"
            f"[bold]Table reach:[/bold] {estimate_table_reach(audience, filters.budget):,}",
            title="Reach Estimate",
        )
    )


def _print_analysis(analysis: AnalysisResult) -> None:
    console.print(
        Panel(
            f"[bold]Primary:[/bold] {', '.join(analysis.primary_interests) or '-'}\n"
            f"[bold]Secondary:[/bold] {', '.join(analysis.secondary_interests) or '-'}\n"
            f"[bold]Market size:[/bold] {format_count(analysis.market_size)}\n"
            f"[bold]Total reach:[/bold] {analysis.total_reach:,}\n"
            f"[bold]Overlap:[/bold] {analysis.overlap:,}",
            title="Interest Analysis",
        )
    )
    console.print(analysis.rationale)
    console.print("\n[bold]Recommendations:[/bold]")
    for recommendation in analysis.recommendations:
        console.print(f"  - {recommendation}")


@app.command()
def analyze(
    terms: list[str] = typer.Argument(..., help="Interest search terms"),
    description: str = typer.Option("", "--description", "-d", help="Business description"),
    top: int = typer.Option(5, "--top", "-n", help="Number of largest results to select"),
    assistant: bool = typer.Option(
        False, "--assistant", help="Also ask the AI assistant for analysis"
    ),
    gender: str = GENDER_OPTION,
    age: str = AGE_OPTION,
    budget: str = BUDGET_OPTION,
    objective: str = OBJECTIVE_OPTION,
    placement: str = PLACEMENT_OPTION,
    token: Optional[str] = TOKEN_OPTION,
) -> None:
    """Search, select the largest interests and analyze the selection."""
    filters = _filters(gender, age, budget, objective, placement)
    state = _create_state(token, filters)
    outcome = _search_or_exit(state, terms)
    if not outcome.audiences:
        return

    async def run() -> tuple:
        client = _create_meta_client()
        try:
            flow = SearchFlow(
                client,
                llm_client=_create_llm_client() if assistant else None,
                state=state,
                country=settings.target_country,
            )
            for audience in sort_audiences(outcome.audiences, "size", "desc")[:top]:
                flow.toggle_selection(audience)
            reply = await flow.analyze_selection_with_assistant() if assistant else None
            return flow.analyze_selection(description), reply
        finally:
            await client.close()

    with _spinner("Analyzing selection..."):
        analysis, reply = asyncio.run(run())

    _print_analysis(analysis)

    if reply is not None:
        if reply.error:
            console.print(f"\n[red]{reply.error}[/red]")
        console.print(Panel(reply.content or "", title="Assistant"))


@app.command()
def suggest(
    interests: list[str] = typer.Argument(..., help="Current interests"),
) -> None:
    """Ask the AI assistant for related interests."""

    async def run():
        client = _create_meta_client()
        try:
            flow = SearchFlow(client, llm_client=_create_llm_client())
            return await flow.suggest_interests(interests)
        finally:
            await client.close()

    with _spinner("Generating suggestions..."):
        reply = asyncio.run(run())

    if reply.error:
        console.print(f"[red]{reply.error}[/red]")
        raise typer.Exit(1)

    for suggestion in reply.interests:
        console.print(f"  + {suggestion}")


@app.command()
def business(
    description: str = typer.Argument(..., help="Business description"),
    location: Optional[str] = typer.Option(None, "--location", "-l", help="Target country"),
) -> None:
    """Derive targeting interests from a business description."""
    llm = _create_llm_client()

    with _spinner("Analyzing business..."):
        try:
            result = asyncio.run(
                llm.analyze_business_description(description, location or settings.target_country)
            )
        except (GenerationError, ValidationError) as e:
            console.print(f"[red]Error analyzing business:[/red] {e}")
            raise typer.Exit(1)

    console.print_json(json.dumps(result))


@app.command()
def chat() -> None:
    """Start an interactive session with the targeting assistant.

    Interests the assistant puts in [brackets] are listed after each reply.
    """
    console.print(
        Panel(
            "[bold blue]Targeting Assistant[/bold blue]\n\n"
            "Describe your business or campaign.\n"
            "Examples:\n"
            "  - 'I want to promote a coffee shop in Jakarta for young professionals'\n"
            "  - 'Handmade fashion accessories for women aged 25-35'\n\n"
            "Type 'quit' or 'exit' to leave.",
            title="Welcome",
        )
    )

    client = _create_meta_client()
    flow = SearchFlow(client, llm_client=_create_llm_client())

    while True:
        try:
            user_input = console.input("\n[bold green]You:[/bold green] ")
        except (KeyboardInterrupt, EOFError):
            break

        if user_input.lower() in ["quit", "exit", "q"]:
            break

        if not user_input.strip():
            continue

        with _spinner("Thinking..."):
            reply = asyncio.run(flow.chat(user_input))

        if reply.error:
            console.print(f"\n[red]{reply.error}[/red]")
            continue

        console.print(f"\n[bold blue]Assistant:[/bold blue] {reply.content}")
        if reply.interests:
            console.print(f"[dim]Interests: {', '.join(reply.interests)}[/dim]")

    asyncio.run(client.close())
    console.print("\n[dim]Goodbye![/dim]")


if __name__ == "__main__":
    app()
