"""Domain layer for projectledger application."""

_SERVICES = {
    "UserService": "projectledger.domain.user",
    "CompanyService": "projectledger.domain.company",
    "ProjectService": "projectledger.domain.project",
    "TransactionService": "projectledger.domain.transaction",
    "SummaryService": "projectledger.domain.summary",
    "ExportService": "projectledger.domain.export",
}

__all__ = list(_SERVICES)


# Services import the database layer, which imports domain entities, so they
# are resolved lazily to keep this package import cycle-free.
def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
