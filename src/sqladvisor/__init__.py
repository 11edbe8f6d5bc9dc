"""SQL Server engineering advisor - rule-driven construct and capability guidance."""

__version__ = "0.1.0"
