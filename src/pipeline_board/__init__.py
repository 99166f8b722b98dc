"""Sales pipeline board: stage columns, optimistic drag moves, live KPIs."""

__version__ = "0.1.0"
