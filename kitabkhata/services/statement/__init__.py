"""Print/statement collaborator."""

from kitabkhata.services.statement.formatting import format_currency, group_indian
from kitabkhata.services.statement.renderer import render_statement

__all__ = ["format_currency", "group_indian", "render_statement"]
