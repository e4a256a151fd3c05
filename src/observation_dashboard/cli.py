"""Command-line interface for the observation dashboard."""

import asyncio
import logging
from datetime import date, datetime
from typing import Optional
from uuid import UUID

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from database import DatabaseConfig, DatabasePool, DatabaseConnectionError, ObservationQueries
from models import DashboardView, DateRange, LoadStatus, Observation, RecordId, TrendDirection, ViewMode
from models.utils import round_percentage
from sync import ChangeDetector, DashboardSession, ObservationLoader, ObservationRefresher

from .config import Settings

app = typer.Typer(
    name="observation-dashboard",
    help="Classroom observation dashboard - scores, averages and live refresh",
    add_completion=False,
)

console = Console()

logger = logging.getLogger(__name__)

TREND_SYMBOLS = {
    TrendDirection.UP: "📈",
    TrendDirection.DOWN: "📉",
    TrendDirection.STABLE: "➖",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def load_settings() -> Settings:
    try:
        settings = Settings.load()
    except ValueError as e:
        console.print(f"[red]❌ Invalid configuration: {e}[/red]")
        raise typer.Exit(code=2)
    configure_logging(settings.app.log_level)
    return settings


def build_pool(settings: Settings) -> DatabasePool:
    db = settings.database
    return DatabasePool(DatabaseConfig(
        dsn=db.url,
        min_size=db.pool_min_size,
        max_size=db.pool_max_size,
        command_timeout=db.command_timeout,
    ))


def build_refresher(settings: Settings, pool: DatabasePool) -> ObservationRefresher:
    queries = ObservationQueries(pool)
    return ObservationRefresher(
        loader=ObservationLoader(queries, tolerate_partial_failures=settings.sync.tolerate_partial_failures),
        detector=ChangeDetector(queries.get_latest_response_timestamp),
        poll_interval=settings.sync.poll_interval_seconds,
        ranking_limit=settings.sync.ranking_limit,
        min_teacher_observations=settings.sync.min_teacher_observations,
    )


def parse_day(value: Optional[str], option: str) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise typer.BadParameter(f"{option} must be YYYY-MM-DD, got {value!r}")


def parse_id(value: Optional[str]) -> Optional[RecordId]:
    """Ids arrive as text; numeric ids become integers and uuid ids become UUIDs."""
    if value is None:
        return None
    if value.isdigit():
        return int(value)
    try:
        return UUID(value)
    except ValueError:
        return value


def render_view(view: DashboardView) -> None:
    """Print KPIs, indicators and ranking for one view."""
    display = view.display
    if display is None:
        console.print(Panel.fit("[yellow]No data for this selection[/yellow]", title="Dashboard"))
        return

    scores = display.dimension_scores
    kpis = view.kpis
    trend = kpis.trend
    if trend.direction == TrendDirection.UNAVAILABLE:
        trend_text = "—"
    elif trend.direction == TrendDirection.STABLE:
        trend_text = f"{TREND_SYMBOLS[trend.direction]} Estable"
    else:
        sign = "+" if trend.direction == TrendDirection.UP else "-"
        trend_text = f"{TREND_SYMBOLS[trend.direction]} {sign}{trend.magnitude}%"

    critical = kpis.critical_dimension
    critical_text = f"{critical.name} {critical.percentage}%" if critical else "—"

    if isinstance(display, Observation):
        header = (
            f"[bold]{display.teacher_name}[/bold] - {display.subject} ({display.course})\n"
            f"Fecha: {display.date or '—'}  Observador: {display.observer_name or '—'}\n"
        )
    else:
        header = f"[bold]{view.caption}[/bold] ({display.observation_count} observaciones)\n"

    console.print(Panel.fit(
        header +
        f"Desempeño Global: [green]{round_percentage(display.total_percentage)}%[/green]\n"
        f"Ambiente: {round_percentage(scores.ambiente)}%  "
        f"Interacción: {round_percentage(scores.interaccion)}%  "
        f"Organización: {round_percentage(scores.organizacion)}%\n"
        f"Dimensión Crítica: {critical_text}  "
        f"Indicadores < 60%: {kpis.low_indicator_count}  "
        f"Tendencia: {trend_text}",
        title=f"Vista {view.selection.view_mode.value}",
    ))

    indicators = Table(title="Análisis Detallado por Indicador")
    indicators.add_column("Indicador")
    indicators.add_column("Dimensión", justify="center")
    indicators.add_column("%", justify="right")
    for item in display.indicators:
        indicators.add_row(item.label, str(item.dimension_id or "—"), f"{round_percentage(item.value)}%")
    console.print(indicators)

    ranking = Table(title="Top Desempeños")
    ranking.add_column("#", justify="right")
    ranking.add_column("Docente")
    ranking.add_column("Asignatura")
    ranking.add_column("%", justify="right")
    for position, observation in enumerate(view.ranking, start=1):
        ranking.add_row(
            str(position),
            observation.teacher_name,
            observation.subject,
            f"{round_percentage(observation.total_percentage)}%",
        )
    console.print(ranking)


@app.command()
def version():
    """Show version information."""
    from observation_dashboard import __version__

    console.print(Panel.fit(
        f"[bold blue]Observation Dashboard[/bold blue]\n"
        f"Version: [green]{__version__}[/green]",
        title="Version Info"
    ))


@app.command()
def test_db():
    """Test database connectivity and the freshness probe."""
    settings = load_settings()
    console.print("[yellow]Testing database connection...[/yellow]")

    async def run() -> bool:
        pool = build_pool(settings)
        try:
            await pool.initialize()
            if not await pool.health_check():
                console.print("[red]❌ Database health check failed[/red]")
                return False
            latest = await ObservationQueries(pool).get_latest_response_timestamp()
            console.print("[green]✅ Database connection successful![/green]")
            console.print(f"Latest response: {latest.isoformat() if latest else 'none'}")
            return True
        except DatabaseConnectionError as e:
            console.print(f"[red]❌ Database connection failed: {e}[/red]")
            return False
        finally:
            await pool.close()

    if not asyncio.run(run()):
        raise typer.Exit(code=1)


@app.command()
def show(
    view: ViewMode = typer.Option(ViewMode.SINGLE, "--view", "-v", help="single, by-teacher or institution"),
    observation: Optional[str] = typer.Option(None, "--observation", "-o", help="Observation id for the single view"),
    teacher: Optional[str] = typer.Option(None, "--teacher", "-t", help="Teacher id for the by-teacher view"),
    date_from: Optional[str] = typer.Option(None, "--from", help="Earliest observation date (YYYY-MM-DD)"),
    date_to: Optional[str] = typer.Option(None, "--to", help="Latest observation date (YYYY-MM-DD)"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Teacher name or subject to jump to"),
):
    """Load the data once and print a view."""
    settings = load_settings()
    day_from = parse_day(date_from, "--from")
    day_to = parse_day(date_to, "--to")
    try:
        date_range = DateRange(date_from=day_from, date_to=day_to)
    except ValueError as e:
        raise typer.BadParameter(str(e))

    async def run() -> Optional[DashboardView]:
        pool = build_pool(settings)
        try:
            try:
                await pool.initialize()
            except DatabaseConnectionError as e:
                console.print(f"[red]❌ Database connection failed: {e}[/red]")
                return None
            refresher = build_refresher(settings, pool)
            session = DashboardSession(refresher, view_mode=view)
            if not await refresher.reload():
                console.print(f"[red]❌ Load failed: {refresher.last_error}[/red]")
                return None
            if observation is not None:
                session.select_observation(parse_id(observation))
            if teacher is not None:
                session.select_teacher(parse_id(teacher))
            session.set_date_range(date_range.date_from, date_range.date_to)
            if search and not session.search(search):
                console.print(f"[yellow]No observation matches {search!r}[/yellow]")
            return session.view()
        finally:
            await pool.close()

    result = asyncio.run(run())
    if result is None:
        raise typer.Exit(code=1)
    render_view(result)


@app.command()
def watch(
    view: ViewMode = typer.Option(ViewMode.INSTITUTION, "--view", "-v", help="View printed on every reload"),
):
    """Poll for new observations and print the view on every new generation."""
    settings = load_settings()

    async def run() -> None:
        pool = build_pool(settings)
        refresher = build_refresher(settings, pool)
        session = DashboardSession(refresher, view_mode=view)
        try:
            await pool.initialize()
        except DatabaseConnectionError as e:
            console.print(f"[red]❌ Database connection failed: {e}[/red]")
            return

        def on_snapshot(snapshot) -> None:
            console.rule(f"Generation {snapshot.generation} - {len(snapshot.observations)} observations")
            render_view(session.view())

        refresher.add_listener(on_snapshot)
        try:
            await refresher.start()
            if refresher.status == LoadStatus.ERROR:
                console.print(f"[red]Initial load failed: {refresher.last_error}[/red]")
            await asyncio.Event().wait()
        finally:
            await refresher.stop()
            await pool.close()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print("[yellow]Stopped[/yellow]")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
