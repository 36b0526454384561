"""Report templates: section definitions, validation and prompt rendering."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from meetdigest.summarization.errors import (
    TemplateError,
    TemplateNotFoundError,
    TemplateValidationError,
)

logger = logging.getLogger(__name__)

TITLE_PLACEHOLDER = "# <Insert title here>"


class SectionFormat(str, enum.Enum):
    PARAGRAPH = "paragraph"
    LIST = "list"
    STRING = "string"


_ALLOWED_FORMATS = tuple(f.value for f in SectionFormat)


@dataclass(frozen=True)
class TemplateSection:
    title: str
    instruction: str
    format: str
    item_format: str | None = None
    example_item_format: str | None = None

    @property
    def effective_item_format(self) -> str | None:
        return self.item_format or self.example_item_format


@dataclass(frozen=True)
class Template:
    name: str
    description: str
    sections: tuple[TemplateSection, ...]

    @classmethod
    def from_dict(cls, data: Mapping) -> Template:
        """Build a template from a parsed JSON/TOML definition and validate it."""
        if not isinstance(data, Mapping):
            raise TemplateValidationError("template definition must be a table")
        raw_sections = data.get("sections", [])
        if not isinstance(raw_sections, list):
            raise TemplateValidationError("'sections' must be a list")

        sections = []
        for i, raw in enumerate(raw_sections):
            if not isinstance(raw, Mapping):
                raise TemplateValidationError(f"section {i} must be a table")
            sections.append(TemplateSection(
                title=str(raw.get("title", "")),
                instruction=str(raw.get("instruction", "")),
                format=str(raw.get("format", "")),
                item_format=raw.get("item_format") or None,
                example_item_format=raw.get("example_item_format") or None,
            ))

        template = cls(
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            sections=tuple(sections),
        )
        template.validate()
        return template

    def validate(self) -> None:
        """Raise TemplateValidationError if the template cannot be used."""
        if not self.name.strip():
            raise TemplateValidationError("template name must not be empty")
        if not self.description.strip():
            raise TemplateValidationError("template description must not be empty")
        if not self.sections:
            raise TemplateValidationError("template must contain at least one section")

        seen: set[str] = set()
        for i, section in enumerate(self.sections):
            if not section.title.strip():
                raise TemplateValidationError(f"section {i} has no title")
            if section.title in seen:
                raise TemplateValidationError(f"section '{section.title}' is defined twice")
            seen.add(section.title)
            if not section.instruction.strip():
                raise TemplateValidationError(f"section '{section.title}' has no instruction")
            if section.format not in _ALLOWED_FORMATS:
                raise TemplateValidationError(
                    f"section '{section.title}' has invalid format '{section.format}'; "
                    f"allowed are {', '.join(repr(f) for f in _ALLOWED_FORMATS)}"
                )

    def render_skeleton(self) -> str:
        """Empty markdown layout of the report, shown to the model as a contract."""
        lines = [TITLE_PLACEHOLDER, ""]
        for section in self.sections:
            lines.extend([f"**{section.title}**", ""])
        return "\n".join(lines)

    def render_instructions(self) -> str:
        """Per-section bullet instructions for the final report prompt."""
        lines = [
            "- **For the main title (`# [AI-generated title]`):** Analyze the entire "
            "transcript and write a short, meaningful title for the meeting.",
        ]
        for section in self.sections:
            instruction = section.instruction.strip().rstrip(".")
            lines.append(f"- **For the section '{section.title}'**: {instruction}.")
            if item_format := section.effective_item_format:
                lines.append(f"  - Items in this section must follow this format: `{item_format}`.")
        return "\n".join(lines) + "\n"


class TemplateRegistry:
    """Id -> Template mapping handed to the summarizer.

    Definitions that fail validation are remembered so that looking them up
    reports why, instead of claiming the id does not exist.
    """

    def __init__(
        self,
        templates: Mapping[str, Template] | None = None,
        invalid: Mapping[str, TemplateError] | None = None,
    ) -> None:
        self._templates = dict(templates or {})
        self._invalid = dict(invalid or {})

    @classmethod
    def builtin(cls) -> TemplateRegistry:
        return cls({tid: Template.from_dict(data) for tid, data in BUILTIN_TEMPLATES.items()})

    def with_user_templates(self, definitions: Mapping[str, Mapping]) -> TemplateRegistry:
        """Return a new registry with user definitions layered over this one."""
        templates = dict(self._templates)
        invalid = dict(self._invalid)
        for tid, data in definitions.items():
            try:
                templates[tid] = Template.from_dict(data)
                invalid.pop(tid, None)
            except TemplateValidationError as exc:
                logger.warning("Ignoring invalid template '%s': %s", tid, exc.reason)
                templates.pop(tid, None)
                invalid[tid] = exc
        return TemplateRegistry(templates, invalid)

    def lookup(self, template_id: str) -> Template:
        if template_id in self._templates:
            return self._templates[template_id]
        if template_id in self._invalid:
            raise self._invalid[template_id]
        raise TemplateNotFoundError(template_id)

    def ids(self) -> list[str]:
        return list(self._templates)

    def items(self) -> Iterator[tuple[str, Template]]:
        return iter(self._templates.items())

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def __len__(self) -> int:
        return len(self._templates)


_ACTION_ITEM_FORMAT = "Name: Task (due date)"

BUILTIN_TEMPLATES: dict[str, dict] = {
    "standard_meeting": {
        "name": "Standard Meeting",
        "description": "Internal team meeting with decisions and action items.",
        "sections": [
            {
                "title": "Summary",
                "instruction": "Summarize the core topics and the most important outcomes in at most two sentences",
                "format": "paragraph",
            },
            {
                "title": "Discussion Points",
                "instruction": "List the main topics that were discussed, one bullet per topic",
                "format": "list",
            },
            {
                "title": "Decisions",
                "instruction": "List every decision that was explicitly made",
                "format": "list",
            },
            {
                "title": "Action Items",
                "instruction": "List every task that was assigned or agreed on, with owner and due date if mentioned",
                "format": "list",
                "item_format": _ACTION_ITEM_FORMAT,
            },
            {
                "title": "Open Questions",
                "instruction": "List questions that were raised but not resolved",
                "format": "list",
            },
        ],
    },
    "client_meeting": {
        "name": "Client Meeting",
        "description": "External meeting with a customer or partner.",
        "sections": [
            {
                "title": "Meeting Title",
                "instruction": "The title or subject of the meeting, only if it is explicitly named in the transcript",
                "format": "string",
            },
            {
                "title": "Participants",
                "instruction": "List the participants mentioned in the transcript",
                "format": "list",
                "example_item_format": "Name (Company, Role)",
            },
            {
                "title": "Summary",
                "instruction": "Summarize the purpose and the outcome of the meeting in at most two sentences",
                "format": "paragraph",
            },
            {
                "title": "Client Requirements",
                "instruction": "List the requirements, wishes and concerns the client expressed",
                "format": "list",
            },
            {
                "title": "Agreements",
                "instruction": "List everything both sides agreed on",
                "format": "list",
            },
            {
                "title": "Action Items",
                "instruction": "List every follow-up task for either side, with owner and due date if mentioned",
                "format": "list",
                "item_format": _ACTION_ITEM_FORMAT,
            },
        ],
    },
    "lecture": {
        "name": "Lecture Notes",
        "description": "Structured notes from a lecture or seminar.",
        "sections": [
            {
                "title": "Summary",
                "instruction": "Give a brief 2-3 sentence overview of what the lecture covered",
                "format": "paragraph",
            },
            {
                "title": "Key Concepts",
                "instruction": "List the main concepts, terms and definitions with a brief explanation each",
                "format": "list",
                "example_item_format": "Concept: short explanation",
            },
            {
                "title": "Key Takeaways",
                "instruction": "List the most important insights and conclusions",
                "format": "list",
            },
        ],
    },
    "brief": {
        "name": "Brief",
        "description": "Three to five scannable bullet points.",
        "sections": [
            {
                "title": "Key Points",
                "instruction": "Summarize the transcript in 3-5 concise bullet points",
                "format": "list",
            },
        ],
    },
}
