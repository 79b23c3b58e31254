from typing import List, Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class Tool(BaseModel):
    """
    A locally registered tool that agents can be granted.
    """

    __tablename__ = "tools"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Deleting a tool removes it from every agent
    agent_links: Mapped[List["AgentTool"]] = relationship(  # noqa: F821
        back_populates="tool", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Tool(id='{self.id}', name='{self.name}')>"
