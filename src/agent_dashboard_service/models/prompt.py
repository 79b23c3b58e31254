import uuid
from typing import List, Optional

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class Prompt(BaseModel):
    """
    A reusable prompt template.

    The text itself lives in versions; each edit of the content creates a new
    PromptVersion with the next version number.
    """

    __tablename__ = "prompts"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    versions: Mapped[List["PromptVersion"]] = relationship(
        back_populates="prompt",
        cascade="all, delete-orphan",
        order_by="desc(PromptVersion.version)",
    )

    def __repr__(self):
        return f"<Prompt(id='{self.id}', name='{self.name}')>"


class PromptLabel(BaseModel):
    """
    A tenant-scoped tag such as "production" or "staging".

    A label is attached to at most one version of any given prompt.
    """

    __tablename__ = "prompt_labels"
    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_prompt_labels_tenant_name"),
    )

    tenant_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)

    def __repr__(self):
        return f"<PromptLabel(id='{self.id}', name='{self.name}', tenant_id='{self.tenant_id}')>"


class PromptVersion(BaseModel):
    """
    A snapshot of prompt content with an incrementing version number.
    """

    __tablename__ = "prompt_versions"
    __table_args__ = (
        UniqueConstraint("prompt_id", "version", name="uq_prompt_versions_prompt_version"),
    )

    prompt_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("prompts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    change_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    label_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("prompt_labels.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    prompt: Mapped["Prompt"] = relationship(back_populates="versions")
    label: Mapped[Optional["PromptLabel"]] = relationship()

    def __repr__(self):
        return f"<PromptVersion(id='{self.id}', prompt_id='{self.prompt_id}', version={self.version})>"
