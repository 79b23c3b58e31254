from enum import Enum

from sqlalchemy import Enum as SQLAEnum
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class Provider(str, Enum):
    """
    Language model providers an agent can be wired to.
    """

    OPENAI = "OPENAI"
    ANTHROPIC = "ANTHROPIC"
    GOOGLE = "GOOGLE"
    AZURE_OPENAI = "AZURE_OPENAI"
    COHERE = "COHERE"
    HUGGING_FACE = "HUGGING_FACE"
    OLLAMA = "OLLAMA"
    MISTRAL = "MISTRAL"


class Model(BaseModel):
    """
    A registered language model (provider plus model name, e.g. OPENAI / gpt-4o).
    """

    __tablename__ = "models"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    provider: Mapped[Provider] = mapped_column(
        SQLAEnum(Provider, name="provider"), nullable=False
    )

    def __repr__(self):
        return f"<Model(id='{self.id}', name='{self.name}', provider='{self.provider}')>"
