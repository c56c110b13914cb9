"""
Entry point of `bear` CLI when run as `python -m bear_notes.tools.cli`.
"""
from .main import run

run()
