# utils/base_model.py
from typing import TypeVar, Any, cast
from pydantic import BaseModel

T = TypeVar('T', bound=BaseModel)


class ImmutableModel(BaseModel):
    """
    Base class for all geometric value types and result records.

    Every kernel entity is created from caller-supplied values, consumed by a
    single operation and discarded, so all models share the same behaviour:
    - Immutability: All instances are frozen after creation
    - Value equality: Two instances with equal fields compare (and hash) equal
    - Strictness: Unknown fields are rejected instead of silently dropped
    - Copyability: Easy creation of modified copies via with_changes()
    """
    model_config = {
        "frozen": True,  # Make all instances immutable
        "extra": "forbid",
    }

    def with_changes(self, **changes: Any) -> T:
        """
        Create a new instance with specified changes.

        The copy is re-validated, so invariants enforced by field and model
        validators (finite components, non-zero directions, ...) still hold.

        Args:
            **changes: Keyword arguments with field values to change

        Returns:
            New instance with updated values

        Raises:
            ValueError: If an invalid field name is provided or the changed
                values violate a model invariant
        """
        current_data = self.model_dump()

        for key, value in changes.items():
            if key not in current_data:
                raise ValueError(f"Invalid field: {key}")
            current_data[key] = value

        cls = self.__class__

        # Create new instance with updated values (cast to help type checker)
        return cast(T, cls.model_validate(current_data))
