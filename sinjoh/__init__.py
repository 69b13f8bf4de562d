"""Readers for Pokémon Platinum NARC archives and field data, with SQLite export and a SQL session."""

__version__ = "0.1.0"