from __future__ import annotations

from datetime import date
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

QuestionType = Literal["text", "textarea", "select", "radio", "checkbox", "boolean", "date", "number"]


class TemplateOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class _TemplateBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    category: str = Field(min_length=1)
    question: str = Field(min_length=1)
    description: str | None = None
    aliases: tuple[str, ...] = ()

    @property
    def category_group(self) -> str:
        return self.category.split(".", 1)[0]


class _OptionsMixin(BaseModel):
    options: tuple[TemplateOption, ...] = Field(min_length=1)

    @property
    def option_values(self) -> tuple[str, ...]:
        return tuple(option.value for option in self.options)


class TextTemplate(_TemplateBase):
    question_type: Literal["text"] = "text"
    default: str | None = None


class TextareaTemplate(_TemplateBase):
    question_type: Literal["textarea"] = "textarea"
    default: str | None = None


class SelectTemplate(_OptionsMixin, _TemplateBase):
    question_type: Literal["select"] = "select"
    default: str | None = None

    @model_validator(mode="after")
    def _default_is_an_option(self) -> "SelectTemplate":
        if self.default is not None and self.default not in self.option_values:
            raise ValueError("default must be one of the option values")
        return self


class RadioTemplate(_OptionsMixin, _TemplateBase):
    question_type: Literal["radio"] = "radio"
    default: str | None = None

    @model_validator(mode="after")
    def _default_is_an_option(self) -> "RadioTemplate":
        if self.default is not None and self.default not in self.option_values:
            raise ValueError("default must be one of the option values")
        return self


class CheckboxTemplate(_OptionsMixin, _TemplateBase):
    question_type: Literal["checkbox"] = "checkbox"
    default: tuple[str, ...] | None = None

    @model_validator(mode="after")
    def _default_are_options(self) -> "CheckboxTemplate":
        if self.default is not None and not set(self.default) <= set(self.option_values):
            raise ValueError("default must only contain option values")
        return self


class BooleanTemplate(_TemplateBase):
    question_type: Literal["boolean"] = "boolean"
    default: bool | None = None


class DateTemplate(_TemplateBase):
    question_type: Literal["date"] = "date"
    default: str | None = None

    @model_validator(mode="after")
    def _default_is_iso_date(self) -> "DateTemplate":
        if self.default is not None:
            try:
                date.fromisoformat(self.default)
            except ValueError:
                raise ValueError("default must be an ISO date (YYYY-MM-DD)") from None
        return self


class NumberTemplate(_TemplateBase):
    question_type: Literal["number"] = "number"
    default: float | None = None


QuestionTemplate = Annotated[
    Union[
        TextTemplate,
        TextareaTemplate,
        SelectTemplate,
        RadioTemplate,
        CheckboxTemplate,
        BooleanTemplate,
        DateTemplate,
        NumberTemplate,
    ],
    Field(discriminator="question_type"),
]

OptionTemplate = Union[SelectTemplate, RadioTemplate, CheckboxTemplate]

question_template_adapter: TypeAdapter[QuestionTemplate] = TypeAdapter(QuestionTemplate)
question_template_list_adapter: TypeAdapter[list[QuestionTemplate]] = TypeAdapter(list[QuestionTemplate])


def parse_template(payload: dict) -> QuestionTemplate:
    return question_template_adapter.validate_python(payload)
