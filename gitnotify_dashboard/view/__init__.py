from .app import ConfigDashboard, create_app

__all__ = ["ConfigDashboard", "create_app"]
