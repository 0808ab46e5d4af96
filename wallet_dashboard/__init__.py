"""Top-level package for the Wallet Dashboard.

The primary modules are:

* ``record_store`` – validated writes and reads over a swappable repository
* ``balance`` / ``budget_tracker`` – derived balance and budget utilisation
* ``aggregator`` – time-bucketed and per-category aggregates for charts
* ``visualization`` – Plotly figures built from those aggregates
* ``dashboard`` – a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run wallet_dashboard/dashboard.py
```
"""

from . import aggregator  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience
from .errors import StorageError, ValidationError, WalletError  # noqa: F401
from .record_store import RecordStore  # noqa: F401

# Streamlit may not be installed in all environments (e.g. during unit
# testing), so the dashboard module is optional.
try:
    from . import dashboard  # type: ignore  # noqa: F401
except ModuleNotFoundError:
    dashboard = None  # type: ignore


__all__ = [
    "aggregator",
    "visualization",
    "dashboard",
    "RecordStore",
    "StorageError",
    "ValidationError",
    "WalletError",
]
