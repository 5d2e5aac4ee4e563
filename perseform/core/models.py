"""Pydantic models for form configs, form states and global values.

Records are stored in camelCase (``inputsConfig``, ``globalKey``,
``parentFormId``, ``triggeringValues``) and accepted in either casing.
"""

from collections.abc import Callable
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.json_schema import SkipJsonSchema

InputType = Literal[
    "button",
    "checkbox",
    "color",
    "date",
    "datetime-local",
    "email",
    "file",
    "hidden",
    "image",
    "month",
    "number",
    "password",
    "radio",
    "range",
    "reset",
    "search",
    "submit",
    "tel",
    "text",
    "time",
    "url",
    "week",
    "select",
    "textarea",
]


class InputOption(BaseModel):
    """A selectable option for an input."""

    value: Any
    label: str


class SimpleRef(BaseModel):
    """Dependency on another input of the same form."""

    kind: Literal["simple"] = "simple"
    id: str


class ScopedRef(BaseModel):
    """Dependency that may live in another form and may gate enablement.

    ``parent_form_id`` names the form instance holding the dependency value
    (defaults to the dependent input's own form). ``triggering_values`` is an
    allow-list: the dependent input is enabled only while the dependency's
    current value is a member of it.
    """

    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["scoped"] = "scoped"
    id: str
    parent_form_id: str | None = Field(default=None, alias="parentFormId")
    triggering_values: list[Any] | None = Field(default=None, alias="triggeringValues")


InputDependency = Annotated[SimpleRef | ScopedRef, Field(discriminator="kind")]

# Called as resolver(state, config)
OptionsResolver = Callable[..., list[InputOption]]


class InputConfig(BaseModel):
    """Static configuration of a single input.

    ``options`` is either a static list, the name of a resolver registered
    in an :class:`~perseform.dependencies.options.OptionsRegistry`, or a
    callable taking ``(state, config)``. Callables cannot be persisted; the
    engine registers them under a generated name when the config is saved.
    """

    model_config = ConfigDict(populate_by_name=True)

    global_key: str | None = Field(default=None, alias="globalKey")
    value: Any = None
    options: list[InputOption] | str | SkipJsonSchema[OptionsResolver] | None = None
    dependencies: list[InputDependency] = Field(default_factory=list)

    # Presentation metadata, stored and returned untouched
    type: InputType | None = None
    label: str | None = None
    placeholder: str | None = None
    required: bool | None = None
    disabled: bool | None = None
    hidden: bool | None = None
    readonly: bool | None = None

    @field_validator(
        "dependencies",
        mode="before",
        json_schema_input_type=list[str | SimpleRef | ScopedRef] | None,
    )
    @classmethod
    def normalize_dependencies(cls, value: Any) -> Any:
        """Turn bare ids into SimpleRef and untagged mappings into ScopedRef."""
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        normalized = []
        for dep in value:
            if isinstance(dep, str):
                normalized.append({"kind": "simple", "id": dep})
            elif isinstance(dep, dict) and "kind" not in dep:
                normalized.append({**dep, "kind": "scoped"})
            else:
                normalized.append(dep)
        return normalized

    @property
    def has_callable_options(self) -> bool:
        return callable(self.options)


class FormConfig(BaseModel):
    """Static template of a form: its inputs, defaults and dependency rules."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    inputs_config: dict[str, InputConfig] = Field(default_factory=dict, alias="inputsConfig")

    def get_input(self, input_id: str) -> InputConfig | None:
        """Get an input config by its ID."""
        return self.inputs_config.get(input_id)

    def global_inputs(self) -> dict[str, InputConfig]:
        """Inputs that mirror a global value."""
        return {
            input_id: input_config
            for input_id, input_config in self.inputs_config.items()
            if input_config.global_key
        }

    def to_record(self) -> dict[str, Any]:
        """Serialize for storage, dropping callable options."""
        callable_inputs = {
            input_id: {"options"}
            for input_id, input_config in self.inputs_config.items()
            if input_config.has_callable_options
        }
        exclude = {"inputs_config": callable_inputs} if callable_inputs else None
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)


class FormState(BaseModel):
    """Live values of one form instance, keyed by input id."""

    id: str
    state: dict[str, Any] = Field(default_factory=dict)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class GlobalValue(BaseModel):
    """A value shared by every input declaring the same global key."""

    id: str
    value: Any = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
