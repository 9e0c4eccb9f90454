"""
Rich terminal rendering for the dashboard view model.
"""
from typing import List, Optional

from rich import box
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from portfolio.aggregator import SeriesData, SideCounts
from .state import DashboardState, NoticeKind
from .view import (
    category_chart,
    fmt_usd,
    kpi_cards,
    position_rows,
    trade_rows,
)

BAR_WIDTH = 28


def create_styled_table(columns: List[str], header_style: str = "bold cyan") -> Table:
    """Rounded table with the first column cyan and the rest right-aligned."""
    table = Table(show_header=True, header_style=header_style, box=box.ROUNDED)
    for idx, col in enumerate(columns):
        if idx == 0:
            table.add_column(col, style="cyan")
        else:
            table.add_column(col, justify="right")
    return table


def create_panel(content, title: str, border_color: str = "blue") -> Panel:
    return Panel(
        content,
        title=f"[bold {border_color}]{title}[/bold {border_color}]",
        border_style=border_color,
    )


def render_notice(state: DashboardState) -> Optional[Text]:
    notice = state.notice
    if notice is None:
        return None
    if notice.kind is NoticeKind.WARN:
        return Text(f"⚠️  {notice.text}", style="bold yellow")
    return Text(f"✅ {notice.text}", style="bold green")


def render_kpis(state: DashboardState) -> Table:
    grid = Table.grid(padding=(0, 4))
    cards = kpi_cards(state)
    for _ in cards:
        grid.add_column()
    cells = []
    for card in cards:
        text = Text()
        text.append(f"{card.label}\n", style="dim")
        text.append(f"{card.value}\n", style=f"bold {card.tone}" if card.tone else "bold")
        text.append(card.sub, style="dim")
        cells.append(text)
    grid.add_row(*cells)
    return grid


def render_bars(series: SeriesData, title: str, color: str = "dark_orange") -> Table:
    """Horizontal bar rows scaled to the largest value."""
    table = create_styled_table([title, "USD", ""], "bold magenta")
    peak = max(series.values) if series.values else 0
    for label, value in zip(series.labels, series.values):
        width = int(round(BAR_WIDTH * value / peak)) if peak > 0 else 0
        table.add_row(label, fmt_usd(value), Text("█" * width, style=color))
    return table


def render_shares(series: SeriesData, title: str) -> Table:
    """Labelled values with their share of the total."""
    table = create_styled_table([title, "USD", "Share"], "bold magenta")
    total = series.total
    for label, value in zip(series.labels, series.values):
        share = f"{value / total * 100:.1f}%" if total > 0 else "0.0%"
        table.add_row(label, fmt_usd(value), share)
    return table


def render_sides(sides: SideCounts) -> Table:
    table = create_styled_table(["Side", "Trades"], "bold magenta")
    table.add_row(Text("Buy", style="green"), str(sides.buy))
    table.add_row(Text("Sell", style="red"), str(sides.sell))
    return table


def render_positions(state: DashboardState) -> Table:
    table = create_styled_table(["Market", "Shares", "Avg entry", "Value", "Unrealized PnL"])
    for row in position_rows(state.positions, state.markets):
        market = Text()
        market.append(row.title, style="bold")
        market.append(f"\n{row.meta}", style="dim")
        if row.root_title:
            market.append(f" • {row.root_title}", style="dim")
        pnl = Text(f"{row.unrealized} ({row.unrealized_pct})", style="green" if row.positive else "red")
        table.add_row(market, row.shares, row.avg_entry, row.value, pnl)
    return table


def render_trades(state: DashboardState, limit: Optional[int] = None) -> Table:
    table = create_styled_table(["Date", "Side", "Price", "Amount", "PnL"])
    styles = {1: "green", -1: "red", 0: "dim"}
    for row in trade_rows(state.trades, limit):
        table.add_row(row.date, row.side, row.price, row.amount, Text(row.pnl, style=styles[row.pnl_sign]))
    return table


def render_dashboard(state: DashboardState, console: Optional[Console] = None, trade_limit: Optional[int] = None):
    """Print the full dashboard for a settled state."""
    console = console or Console()
    header = Text()
    header.append("Opinion Portfolio Tracker\n", style="bold dark_orange")
    header.append(state.address or "no address", style="cyan")
    notice = render_notice(state)
    console.print(create_panel(Group(header, notice) if notice else header, "Wallet", "dark_orange"))

    if state.error:
        return

    console.print(create_panel(render_kpis(state), "Overview"))
    charts = state.charts
    console.print(create_panel(
        Group(
            render_bars(charts.volume, f"Volume (last {len(charts.volume.labels)} days)"),
            render_sides(charts.sides),
            render_shares(category_chart(charts.categories), "Category"),
            render_shares(charts.root_markets, "Root market"),
        ),
        "Charts",
        "magenta",
    ))
    console.print(create_panel(render_positions(state), f"Positions ({state.stats.positions_count})", "green"))
    console.print(create_panel(render_trades(state, trade_limit), "Recent trades", "cyan"))
