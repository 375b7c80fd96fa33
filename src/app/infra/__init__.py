"""Implementações concretas de IO (stores, fontes externas)."""
