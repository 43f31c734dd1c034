"""Domain layer for ledgerprune application."""

_SERVICES = {
    "BalanceAggregator": "ledgerprune.domain.balance",
    "DependentRecordResolver": "ledgerprune.domain.resolver",
    "QuantityReconciler": "ledgerprune.domain.reconciler",
    "OrphanFinder": "ledgerprune.domain.orphans",
    "CleanupService": "ledgerprune.domain.cleanup",
}

__all__ = list(_SERVICES)


# Services import the config module, which imports domain errors; load them
# lazily so importing ledgerprune.domain.errors stays cycle free.
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
