"""Domain layer for partyplan application."""

__all__ = [
    "GuestService",
    "ExpenseService",
    "GuestImportService",
    "GuestExportService",
]


# Services are loaded lazily: the database layer imports domain entities.
def __getattr__(name):
    if name == "GuestService":
        from partyplan.domain.guest import GuestService
        return GuestService
    if name == "ExpenseService":
        from partyplan.domain.expense import ExpenseService
        return ExpenseService
    if name == "GuestImportService":
        from partyplan.domain.csv_import import GuestImportService
        return GuestImportService
    if name == "GuestExportService":
        from partyplan.domain.csv_export import GuestExportService
        return GuestExportService
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
