"""
Literature Notes

Index a reference manager's CSL-JSON export by citation key and create
template-driven literature notes in a Markdown vault.
"""

__version__ = "0.1.0"
