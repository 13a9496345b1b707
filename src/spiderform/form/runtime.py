# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Form runtime: binds data to a definition and caches validation results.

A :class:`Form` moves through three states:

- ``UNBOUND``: created without data (add mode).
- ``BOUND``: data was passed at construction (edit mode), submitted or
  replaced. Any change of data or validation groups returns here.
- ``VALIDATED``: the violation tree for the current data and groups has
  been computed and is cached until the next change.

Bound data holds model values. Submitted data is view data: it passes the
``PRE_SUBMIT`` listeners, loses the keys of disabled fields and is reverse
transformed by each field's data transformers before it is merged.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any

from spiderform.form.events import EventDispatcher, FormEvent, FormEvents
from spiderform.model.constraints import DEFAULT_GROUP
from spiderform.model.fields import FormDefinition
from spiderform.transform import reverse_transform_value, transform_value
from spiderform.validation import DEFAULT_MESSAGES, Violation, ViolationTree, evaluate, resolve_path

if TYPE_CHECKING:
    from spiderform.rendering.output import OutputFormat
    from spiderform.rendering.renderer import Renderer, RenderWarning

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class FormState(Enum):
    UNBOUND = "unbound"
    BOUND = "bound"
    VALIDATED = "validated"


class Form:
    """A definition bound to request-local data.

    Args:
        definition: The immutable form blueprint.
        data: Initial data; passing it puts the form in edit mode.
        validation_groups: Groups to validate; defaults to ``("Default",)``.
        translator: Translator used for error messages and labels.
        dispatcher: Event dispatcher; defaults to the one registered on the
            definition, or an empty one.
    """

    def __init__(
        self,
        definition: FormDefinition,
        data: Mapping[str, Any] | None = None,
        *,
        validation_groups: Iterable[str] | None = None,
        translator: Any = None,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        self.definition = definition
        self.translator = translator
        self.events: EventDispatcher = dispatcher or definition.events or EventDispatcher()
        self.submitted = False
        self.render_warnings: list[RenderWarning] = []
        self._data: dict[str, Any] = {}
        self._groups: tuple[str, ...] = _groups(validation_groups)
        self._violations: ViolationTree | None = None
        self._state = FormState.UNBOUND
        if data is not None:
            self.set_data(data)

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def data(self) -> dict[str, Any]:
        """Return a copy of the bound data."""
        return copy.deepcopy(self._data)

    @property
    def validation_groups(self) -> tuple[str, ...]:
        return self._groups

    @property
    def violations(self) -> ViolationTree | None:
        """Return the cached violation tree, or None if not yet validated."""
        return self._violations

    def submit(self, data: Mapping[str, Any]) -> Form:
        """Merge submitted view *data* over the current data and mark the form as submitted.

        Values of disabled fields are ignored. ``PRE_SUBMIT`` listeners see
        the raw data, ``SUBMIT`` listeners the reverse transformed data and
        ``POST_SUBMIT`` listeners the merged result.
        """
        event = self._dispatch(FormEvents.PRE_SUBMIT, dict(data))
        accepted = {key: value for key, value in event.data.items() if key not in self._disabled_fields()}
        event = self._dispatch(FormEvents.SUBMIT, self.reverse_transform(accepted))
        self._data.update(event.data)
        self.submitted = True
        self._invalidate()
        self._dispatch(FormEvents.POST_SUBMIT, dict(self._data))
        return self

    def set_data(self, data: Mapping[str, Any]) -> Form:
        """Replace the bound model data without marking the form as submitted."""
        event = self._dispatch(FormEvents.PRE_SET_DATA, dict(data))
        self._data = dict(event.data)
        self._invalidate()
        self._dispatch(FormEvents.POST_SET_DATA, dict(self._data))
        return self

    def set_validation_groups(self, groups: Iterable[str]) -> Form:
        self._groups = _groups(groups)
        if self._state is FormState.VALIDATED:
            self._invalidate()
        return self

    def get_violations(self) -> ViolationTree:
        """Validate the bound data once and return the cached tree.

        Field defaults stand in for missing entries. A submitted form with
        CSRF protection also needs a valid token.
        """
        if self._violations is None:
            tree = evaluate(self.definition, self._effective_data(), self._groups, translator=self.translator)
            if self.submitted and self.definition.is_csrf_protected:
                self._check_csrf(tree)
            self._violations = tree
            self._state = FormState.VALIDATED
            event = FormEvents.VALIDATION_SUCCESS if tree.is_empty() else FormEvents.VALIDATION_ERROR
            self._dispatch(event, tree)
        return self._violations

    def is_valid(self) -> bool:
        return self.get_violations().is_empty()

    def get_errors(self, deep: bool = False) -> dict[str, Any]:
        """Return error messages keyed by path, nested by dots when *deep*."""
        violations = self.get_violations()
        return violations.to_nested() if deep else violations.to_dict()

    def get_value(self, name: str) -> Any:
        """Return the bound value of *name*, or the field's default."""
        value = resolve_path(self._data, name, _MISSING)
        if value is not _MISSING:
            return value
        field_def = self.definition.get_field(name)
        return field_def.default if field_def is not None else None

    def get_view_value(self, name: str) -> Any:
        """Return the value of *name* as shown in its input.

        The CSRF field always shows the current token. Other values pass
        the field's transformers; a value they cannot convert is shown as is.
        """
        if self.definition.is_csrf_protected and name == self.definition.csrf_field:
            return self.definition.csrf.generate_token(self.definition.csrf_token_id)
        value = self.get_value(name)
        field_def = self.definition.get_field(name)
        if field_def is None or not field_def.transformers:
            return value
        try:
            return transform_value(field_def.transformers, value)
        except (ValueError, TypeError) as exc:
            logger.warning("Cannot transform value of field '%s' for display: %s", name, exc)
            return value

    def reverse_transform(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Return *data* with submitted values converted to model values.

        A value a transformer rejects is kept unchanged so the constraints
        report it.
        """
        result = dict(data)
        for field_def in self.definition.fields:
            if not field_def.transformers or field_def.name not in result:
                continue
            try:
                result[field_def.name] = reverse_transform_value(field_def.transformers, result[field_def.name])
            except (ValueError, TypeError) as exc:
                logger.warning("Cannot transform submitted value of field '%s': %s", field_def.name, exc)
        return result

    def validated_data(self) -> dict[str, Any] | None:
        """Return the values of all declared input fields, or None if invalid."""
        if not self.is_valid():
            return None
        return {
            f.name: self.get_value(f.name)
            for f in self.definition.fields
            if not f.is_button and f.name != self.definition.csrf_field
        }

    def render(self, renderer: Renderer | None = None, output_format: OutputFormat | str | None = None) -> str:
        """Render this form with *renderer* (a default :class:`Renderer` if omitted)."""
        if renderer is None:
            from spiderform.rendering.renderer import Renderer

            renderer = Renderer()
        return renderer.render(self, output_format)

    def __repr__(self) -> str:
        return f"Form(name={self.name!r}, state={self._state.value})"

    def _invalidate(self) -> None:
        self._violations = None
        self._state = FormState.BOUND

    def _dispatch(self, event: FormEvents, data: Any) -> FormEvent:
        return self.events.dispatch(event, FormEvent(self, data))

    def _disabled_fields(self) -> set[str]:
        return {f.name for f in self.definition.fields if f.disabled}

    def _effective_data(self) -> dict[str, Any]:
        data = dict(self._data)
        for field_def in self.definition.fields:
            if field_def.default is None or field_def.name == self.definition.csrf_field:
                continue
            if resolve_path(data, field_def.name, _MISSING) is _MISSING:
                data[field_def.name] = field_def.default
        return data

    def _check_csrf(self, tree: ViolationTree) -> None:
        definition = self.definition
        if definition.csrf.validate_token(definition.csrf_token_id, self._data, definition.csrf_field):
            return
        message = None
        if self.translator is not None:
            message = self.translator.get("form.error.invalid_csrf")
        tree.add(
            Violation(
                path=definition.csrf_field,
                message=message or DEFAULT_MESSAGES["invalid_csrf"],
                constraint_kind="csrf",
                code="invalid_csrf",
            )
        )


# ################
# Implementation
# ################

_MISSING = object()


def _groups(groups: Iterable[str] | None) -> tuple[str, ...]:
    if groups is None:
        return (DEFAULT_GROUP,)
    if isinstance(groups, str):
        return (groups,)
    return tuple(groups)
