"""Domain layer for journalsynth application."""

_EXPORTS = {
    "IntegrationService": "journalsynth.domain.integration",
    "RegistryService": "journalsynth.domain.registry",
    "IntegrationStatusService": "journalsynth.domain.status",
    "load_transactions": "journalsynth.domain.csv_import",
    "export_rows": "journalsynth.domain.export",
    "write_export_csv": "journalsynth.domain.export",
}

__all__ = list(_EXPORTS)


# Services import the database layer, which imports domain.entities;
# resolve them lazily so importing either package first works.
def __getattr__(name):
    if name in _EXPORTS:
        from importlib import import_module

        return getattr(import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
