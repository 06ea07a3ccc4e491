"""Category model for transaction categorization."""

from dataclasses import dataclass, field
from typing import Optional

from errors import InvalidCategoryName

# The flat-file store and the old CSV exports use this as a field separator
RESERVED_SEPARATOR = ","

NEW_CATEGORY_PROMPT = "NEW CATEGORY"
CHOOSE_ANOTHER_CATEGORY_PROMPT = "CHOOSE ANOTHER CATEGORY"
RESERVED_PROMPT_KEYWORDS = (NEW_CATEGORY_PROMPT, CHOOSE_ANOTHER_CATEGORY_PROMPT)


def canonicalize_name(name: Optional[str]) -> str:
    """Trim and upper-case a category name."""
    return (name or "").strip().upper()


@dataclass(eq=False)
class Category:
    """Represents a user-defined transaction category.

    The name is canonicalized on construction and can't be changed
    afterwards. Two categories are equal when their canonical names are
    equal; the persistent id is not part of the
    comparison because it is only assigned once the category is saved.

    Attributes:
        name: Canonical (trimmed, upper-cased) category name.
        id: Persistent identifier, None until the category has been saved.
    """

    name: str
    id: Optional[int] = field(default=None)

    def __setattr__(self, key, value):
        if key == "name":
            if "name" in self.__dict__:
                raise AttributeError("Category name is read-only")
            value = canonicalize_name(value)
        super().__setattr__(key, value)

    def __eq__(self, other):
        if not isinstance(other, Category):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash(self.name)


UNKNOWN = Category("UNKNOWN")
TRANSFER = Category("TRANSFER")


def validate_category_name(name: Optional[str]) -> str:
    """Check a user supplied category name and return its canonical form.

    Args:
        name: Raw name as typed by the user.

    Returns:
        The canonicalized name.

    Raises:
        InvalidCategoryName: If the name is blank, contains the reserved
            separator, or collides with a prompt keyword.
    """
    canonical = canonicalize_name(name)
    if not canonical:
        raise InvalidCategoryName("Category names must not be blank")
    if RESERVED_SEPARATOR in canonical:
        raise InvalidCategoryName(
            f"Category names must not contain '{RESERVED_SEPARATOR}'"
        )
    if canonical in RESERVED_PROMPT_KEYWORDS:
        raise InvalidCategoryName(f'Category cannot be called "{canonical}"')
    return canonical
