class BaseDashboardException(Exception):
    pass
