"""
Request builders

A builder is a mutable staging area for one request. Setters only record
values; all checks run in a single pass when the builder is finalized, driven
by three class-level tables:

    required   fields that must be set (list fields must also be non-empty)
    exclusive  groups in which at most one field may be set
    one_of     groups in which at least one field must be set

finalize() returns a frozen request model. build() finalizes and, when the
builder came from a resource service, dispatches the request and returns the
typed response. Builders are single-use.
"""

import logging
import uuid
from typing import Any, Awaitable, Callable, ClassVar, Dict, List, Optional, Sequence, Tuple, Type

import pydantic

from .exceptions import BuilderConsumedError, ConflictError, ValidationError


logger = logging.getLogger(__name__)

Dispatch = Callable[[Any], Awaitable[Any]]


def new_idempotency_key() -> str:
    """Fresh idempotency key accepted by every Square write endpoint"""
    return str(uuid.uuid4())


def _is_set(values: Dict[str, Any], name: str) -> bool:
    value = values.get(name)
    if value is None:
        return False
    if isinstance(value, (list, tuple)) and not value:
        return False
    return True


def check_constraints(label: str, values: Dict[str, Any],
                      required: Sequence[str] = (),
                      exclusive: Sequence[Sequence[str]] = (),
                      one_of: Sequence[Sequence[str]] = ()) -> None:
    """
    Validate a set of staged field values against a constraint table

    Args:
        label: Name used in error messages (usually the builder class)
        values: Staged values keyed by field name
        required: Fields that must be present
        exclusive: Groups of mutually-exclusive fields
        one_of: Groups of which at least one field must be present

    Raises:
        ConflictError: If more than one field of an exclusive group is set
        ValidationError: If required fields are missing; ``fields`` lists
            exactly the missing ones, in declaration order
    """
    for group in exclusive:
        present = [name for name in group if _is_set(values, name)]
        if len(present) > 1:
            raise ConflictError(
                f"{label}: fields are mutually exclusive: {', '.join(present)}",
                fields=present,
            )

    missing = [name for name in required if not _is_set(values, name)]
    if missing:
        raise ValidationError(
            f"{label}: missing required field(s): {', '.join(missing)}",
            fields=missing,
        )

    for group in one_of:
        if not any(_is_set(values, name) for name in group):
            raise ValidationError(
                f"{label}: at least one of {', '.join(group)} is required",
                fields=list(group),
            )


class RequestBuilder:
    """Base class for all fluent request builders"""

    request_model: ClassVar[Optional[Type[pydantic.BaseModel]]] = None
    required: ClassVar[Tuple[str, ...]] = ()
    exclusive: ClassVar[Tuple[Tuple[str, ...], ...]] = ()
    one_of: ClassVar[Tuple[Tuple[str, ...], ...]] = ()

    def __init__(self, dispatch: Optional[Dispatch] = None):
        """
        Args:
            dispatch: Coroutine function that sends the finalized request.
                Services pass their own create/update method here; a builder
                without one returns the request object from build().
        """
        self._values: Dict[str, Any] = {}
        self._dispatch = dispatch
        self._consumed = False

    def _set(self, name: str, value: Any) -> 'RequestBuilder':
        if value is None:
            self._values.pop(name, None)
        else:
            self._values[name] = value
        return self

    def _append(self, name: str, value: Any) -> 'RequestBuilder':
        self._values.setdefault(name, []).append(value)
        return self

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _resolve(self, value: Any, children: List['RequestBuilder']) -> Any:
        # Nested builders are materialized but only consumed once the parent succeeds
        if isinstance(value, RequestBuilder):
            children.append(value)
            return value._materialize()
        if isinstance(value, list):
            return [self._resolve(item, children) for item in value]
        return value

    def _assemble(self, values: Dict[str, Any]) -> Any:
        """Turn validated values into the request object"""
        return self.request_model(**values)

    def _materialize(self) -> Any:
        if self._consumed:
            raise BuilderConsumedError(f"{type(self).__name__} has already been built")

        label = type(self).__name__
        check_constraints(label, self._values, self.required, self.exclusive, self.one_of)

        children: List[RequestBuilder] = []
        values = {name: self._resolve(value, children) for name, value in self._values.items()}
        try:
            request = self._assemble(values)
        except pydantic.ValidationError as e:
            fields = [str(err["loc"][0]) for err in e.errors() if err.get("loc")]
            raise ValidationError(f"{label}: invalid field value(s): {e}", fields=fields) from e

        for child in children:
            child._consumed = True
        return request

    def finalize(self) -> Any:
        """
        Validate the staged fields and return the frozen request object

        Raises:
            ConflictError: Mutually-exclusive fields were both set
            ValidationError: Required fields are missing or a value is invalid
            BuilderConsumedError: The builder was already finalized
        """
        request = self._materialize()
        self._consumed = True
        logger.debug(f"Built {type(request).__name__}")
        return request

    async def build(self) -> Any:
        """
        Finalize and, for builders bound to a service, dispatch exactly once

        Returns:
            The typed response for bound builders, the request object otherwise
        """
        request = self.finalize()
        if self._dispatch is None:
            return request
        return await self._dispatch(request)
