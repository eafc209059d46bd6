"""Closed enumerations shared by the ORM models."""

from enum import Enum

from sqlalchemy import Enum as SAEnum

from rjilat.core.errors import ValidationError


class ContentStatus(str, Enum):
    """Moderation status carried by posts and comments."""

    ACTIVE = "active"
    HIDDEN = "hidden"
    REPORTED = "reported"

    @classmethod
    def parse(cls, value: "str | ContentStatus") -> "ContentStatus":
        """Return the member for `value` or raise ``ValidationError``."""
        try:
            return cls(value)
        except ValueError as err:
            raise ValidationError(
                f"Invalid status '{value}'; expected one of "
                + ", ".join(member.value for member in cls),
                code="invalid_status",
            ) from err


class UserRole(str, Enum):
    """Role attached to a caller identity."""

    USER = "user"
    ADMIN = "admin"


def enum_column(enum_cls: type[Enum], name: str) -> SAEnum:
    """Store an enum by value in a portable VARCHAR column."""
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )
