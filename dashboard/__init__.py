"""Terminal dashboard for an Opinion Protocol wallet."""
from .controller import DashboardController, PartialDataError
from .fetcher import PortfolioApiClient
from .state import DashboardState, DashboardStatus, Notice, NoticeKind

__all__ = [
    "DashboardController",
    "PartialDataError",
    "PortfolioApiClient",
    "DashboardState",
    "DashboardStatus",
    "Notice",
    "NoticeKind",
]
