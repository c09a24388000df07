"""Rule-based validation engine.

A validator holds an ordered list of rules and a list of normalizers.
Normalizers always run first and may rewrite fields on the entity (e.g.
trimming a title). Each rule is then evaluated in order: its applicability
predicate decides whether the rule runs at all, and its check decides
whether the entity passes. Failures are collected per field, in rule order.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from moovover.errors import ArgumentError, ConflictError, FieldError, ValidationError

if TYPE_CHECKING:
    from moovover.repository.base import Repository

Predicate = Callable[[Any], bool]
Normalizer = Callable[[Any], None]


def _always(_entity: Any) -> bool:
    return True


class Rule:
    """A single check on one field of an entity."""

    def __init__(
        self,
        field: str,
        code: str,
        message: str,
        check: Predicate,
        applies: Predicate = _always,
    ) -> None:
        """Initialize the rule.

        Args:
            field: Name of the field the error is reported on.
            code: Machine-readable error code.
            message: Message template; ``{value}`` is replaced with the
                field's current value.
            check: Predicate over the entity, true when the entity passes.
            applies: Predicate over the entity, false to skip the rule.
        """
        self.field = field
        self.code = code
        self.message = message
        self.check = check
        self.applies = applies

    def is_applicable(self, entity: Any) -> bool:
        """Whether the rule should run for this entity."""
        return self.applies(entity)

    async def passes(self, entity: Any, repository: Repository | None) -> bool:  # noqa: ARG002
        """Whether the entity satisfies the rule."""
        return self.check(entity)

    def error(self, entity: Any) -> FieldError:
        """Build the error reported when the rule fails."""
        value = getattr(entity, self.field, None)
        blank = value is None or (isinstance(value, str) and not value.strip())
        message = self.message.format(value="" if value is None else value).strip()
        leads_with_value = self.message.startswith("{value}") and not blank
        return FieldError(code=self.code, message=message, leads_with_value=leads_with_value)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.field}:{self.code}>"


class UniquenessRule(Rule):
    """Fails when another stored entity shares the field and its scope fields."""

    def __init__(
        self,
        field: str,
        scope: Sequence[str] = (),
        message: str = "has already been taken",
    ) -> None:
        self.scope = tuple(scope)
        super().__init__(
            field,
            "taken",
            message,
            check=_always,
            applies=self._values_present,
        )

    @property
    def fields(self) -> tuple[str, ...]:
        """The field followed by its scope fields."""
        return (self.field, *self.scope)

    def _values_present(self, entity: Any) -> bool:
        return all(getattr(entity, name, None) is not None for name in self.fields)

    async def passes(self, entity: Any, repository: Repository | None) -> bool:
        if repository is None:
            raise ArgumentError(f"{self!r} needs a repository to check uniqueness")
        criteria = {name: getattr(entity, name) for name in self.fields}
        duplicate = await repository.exists(
            type(entity), exclude_id=getattr(entity, "id", None), **criteria
        )
        return not duplicate


class Validator:
    """Ordered normalizers and rules for one entity type."""

    def __init__(self, rules: Sequence[Rule], normalizers: Sequence[Normalizer] = ()) -> None:
        self.rules = tuple(rules)
        self.normalizers = tuple(normalizers)

    def normalize(self, entity: Any) -> None:
        """Run every normalizer on the entity in place."""
        for normalizer in self.normalizers:
            normalizer(entity)

    async def errors_for(
        self,
        entity: Any,
        repository: Repository | None = None,
        *,
        check_uniqueness: bool = True,
    ) -> dict[str, list[FieldError]]:
        """Normalize the entity and collect the errors of every failing rule.

        Args:
            entity: The candidate entity.
            repository: Persistence collaborator used by uniqueness rules.
            check_uniqueness: Set to False to skip uniqueness rules, e.g.
                when the caller resolves duplicates itself.

        Returns:
            Field name -> errors in rule order. Empty when the entity is valid.

        Raises:
            ArgumentError: If a uniqueness rule runs without a repository.
        """
        self.normalize(entity)

        errors: dict[str, list[FieldError]] = {}
        for rule in self.rules:
            if not check_uniqueness and isinstance(rule, UniquenessRule):
                continue
            if not rule.is_applicable(entity):
                continue
            if not await rule.passes(entity, repository):
                errors.setdefault(rule.field, []).append(rule.error(entity))
        return errors

    async def validate(
        self,
        entity: Any,
        repository: Repository | None = None,
        *,
        check_uniqueness: bool = True,
    ) -> None:
        """Normalize and validate the entity.

        Raises:
            ValidationError: If any rule fails.
        """
        errors = await self.errors_for(entity, repository, check_uniqueness=check_uniqueness)
        if errors:
            raise ValidationError(errors)

    async def is_valid(self, entity: Any, repository: Repository | None = None) -> bool:
        """Whether the entity passes every rule."""
        return not await self.errors_for(entity, repository)

    def conflict_error(self, conflict: ConflictError) -> ValidationError:
        """Translate a persistence conflict into a ``taken`` validation error.

        Raises:
            ConflictError: The original conflict, if this validator has no
                uniqueness rule to attribute it to.
        """
        for rule in self.rules:
            if isinstance(rule, UniquenessRule):
                error = FieldError(code=rule.code, message=rule.message)
                return ValidationError({rule.field: [error]})
        raise conflict
