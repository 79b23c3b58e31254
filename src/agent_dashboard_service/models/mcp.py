from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class Mcp(BaseModel):
    """
    An external MCP server that exposes tools over HTTP.
    """

    __tablename__ = "mcps"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self):
        return f"<Mcp(id='{self.id}', name='{self.name}', url='{self.url}')>"
