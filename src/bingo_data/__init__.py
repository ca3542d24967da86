"""Catalogs bundled with the bingo board generator."""
