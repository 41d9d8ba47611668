from .dashboard import dashboard_stats, recent_activities, stock_report

__all__ = [
    "dashboard_stats",
    "recent_activities",
    "stock_report",
]
