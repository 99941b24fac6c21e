"""Entry, partial and string table loading."""

from .registry import load_entry, load_partials, load_strings, read_text, strings_path

__all__ = ["load_entry", "load_partials", "load_strings", "read_text", "strings_path"]
