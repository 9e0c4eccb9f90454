"""
Dashboard state record and transitions.

The whole view is one immutable DashboardState; the controller replaces it
through the transition functions below, never by mutating fields.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from portfolio.aggregator import AggregateStats, SeriesData, SideCounts


class DashboardStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class NoticeKind(str, Enum):
    OK = "ok"
    WARN = "warn"


@dataclass(frozen=True)
class Notice:
    kind: NoticeKind
    text: str

    @classmethod
    def ok(cls, text: str) -> "Notice":
        return cls(NoticeKind.OK, text)

    @classmethod
    def warn(cls, text: str) -> "Notice":
        return cls(NoticeKind.WARN, text)


@dataclass(frozen=True)
class ChartSeries:
    volume: SeriesData = field(default_factory=SeriesData)
    sides: SideCounts = field(default_factory=SideCounts)
    categories: SeriesData = field(default_factory=SeriesData)
    root_markets: SeriesData = field(default_factory=SeriesData)


@dataclass(frozen=True)
class DashboardState:
    status: DashboardStatus = DashboardStatus.IDLE
    address: str = ""
    positions: Tuple[dict, ...] = ()
    trades: Tuple[dict, ...] = ()
    markets: Dict[str, dict] = field(default_factory=dict)
    stats: AggregateStats = field(default_factory=AggregateStats)
    charts: ChartSeries = field(default_factory=ChartSeries)
    notices: Tuple[Notice, ...] = ()
    error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.status is DashboardStatus.LOADING

    @property
    def notice(self) -> Optional[Notice]:
        """Most recent notice (what the banner shows)."""
        return self.notices[-1] if self.notices else None


def begin_loading(state: DashboardState, address: str) -> DashboardState:
    """Enter LOADING: notices cleared, previous data dropped."""
    return DashboardState(status=DashboardStatus.LOADING, address=address)


def complete(
    state: DashboardState,
    positions: List[dict],
    trades: List[dict],
    markets: Dict[str, dict],
    stats: AggregateStats,
    charts: ChartSeries,
    notices: List[Notice],
) -> DashboardState:
    """Enter SUCCESS with freshly aggregated data."""
    return replace(
        state,
        status=DashboardStatus.SUCCESS,
        positions=tuple(positions),
        trades=tuple(trades),
        markets=dict(markets),
        stats=stats,
        charts=charts,
        notices=tuple(notices),
        error=None,
    )


def fail(state: DashboardState, message: str) -> DashboardState:
    """Enter ERROR; all derived data reset to empty/zero."""
    return DashboardState(
        status=DashboardStatus.ERROR,
        address=state.address,
        notices=(Notice.warn(message),),
        error=message,
    )
