"""tzmap - organiser timezone to system timezone mapping store.

Keeps the table that lets a calendar sync engine translate a remote
service's organiser timezone names into timezones the local host knows.
The table is edited through any grid-like view and persisted as XML.

Package entry point. Exports the version string only; the CLI in main.py
imports the functional modules on demand.
"""

__version__ = "0.1.0"
