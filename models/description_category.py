from dataclasses import dataclass
from typing import Optional

from models.category import Category


@dataclass(frozen=True)
class DescriptionCategory:
    """A learned association between a transaction description and a category."""

    description: str
    category: Category
    id: Optional[int] = None
