# utils/registry.py
from typing import Callable, Dict, List, Optional, Type
from pydantic import BaseModel


class RegisteredOperation:
    """An operation exposed to request handlers, with the record it consumes."""

    def __init__(self, name: str, input_model: Type[BaseModel],
                 handler: Callable[[BaseModel], BaseModel], component: str = ""):
        self.name = name
        self.input_model = input_model
        self.handler = handler
        self.component = component

    def parse(self, payload) -> BaseModel:
        """Validate a raw payload (mapping or model instance) into the input record"""
        return self.input_model.model_validate(payload)

    def run(self, request: BaseModel) -> BaseModel:
        """Run the handler on an already validated input record"""
        return self.handler(request)

    def __repr__(self) -> str:
        return f"RegisteredOperation({self.name!r}, input={self.input_model.__name__})"


class OperationRegistry:
    """Name -> operation lookup used by the request-level facade"""

    def __init__(self):
        self.operations: Dict[str, RegisteredOperation] = {}

    def register(self, name: str, input_model: Type[BaseModel], component: str = ""):
        """
        Decorator registering a handler under ``name``.

        Args:
            name: Public operation name (e.g. "ray_sphere")
            input_model: Pydantic model the raw payload is validated into
            component: Kernel component the operation belongs to

        Raises:
            ValueError: If the name is already taken
        """
        def decorator(handler):
            if name in self.operations:
                raise ValueError(f"Operation already registered: {name}")
            self.operations[name] = RegisteredOperation(name, input_model, handler, component)
            return handler
        return decorator

    def get(self, name: str) -> Optional[RegisteredOperation]:
        """Get operation by name"""
        return self.operations.get(name)

    def names(self, component: Optional[str] = None) -> List[str]:
        """Sorted operation names, optionally restricted to one component"""
        return sorted(
            op.name for op in self.operations.values()
            if component is None or op.component == component
        )

    def __contains__(self, name: str) -> bool:
        return name in self.operations

    def __len__(self) -> int:
        return len(self.operations)
