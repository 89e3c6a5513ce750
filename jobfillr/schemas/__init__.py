from .answers import (
    AnswerSource,
    AnswerValue,
    CompletionReport,
    CompletionSections,
    Confidence,
    MatchContext,
    ObservedQuestion,
    ResolvedAnswer,
    UserAnswer,
)
from .profile import (
    Address,
    Education,
    EducationData,
    Links,
    PersonalInfo,
    Profile,
    ProfileSnapshot,
    WorkExperience,
    WorkExperienceData,
)
from .templates import (
    BooleanTemplate,
    CheckboxTemplate,
    DateTemplate,
    NumberTemplate,
    QuestionTemplate,
    QuestionType,
    RadioTemplate,
    SelectTemplate,
    TemplateOption,
    TextareaTemplate,
    TextTemplate,
    parse_template,
)

__all__ = [
    "Address",
    "AnswerSource",
    "AnswerValue",
    "BooleanTemplate",
    "CheckboxTemplate",
    "CompletionReport",
    "CompletionSections",
    "Confidence",
    "DateTemplate",
    "Education",
    "EducationData",
    "Links",
    "MatchContext",
    "NumberTemplate",
    "ObservedQuestion",
    "PersonalInfo",
    "Profile",
    "ProfileSnapshot",
    "QuestionTemplate",
    "QuestionType",
    "RadioTemplate",
    "ResolvedAnswer",
    "SelectTemplate",
    "TemplateOption",
    "TextTemplate",
    "TextareaTemplate",
    "UserAnswer",
    "WorkExperience",
    "WorkExperienceData",
    "parse_template",
]
