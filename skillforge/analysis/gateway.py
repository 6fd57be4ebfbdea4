"""Adapter between media artifacts and the remote analysis service."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from google import genai
from google.genai import types

from skillforge.analysis.prompts import get_skill_generation_prompt
from skillforge.config import Settings
from skillforge.constants import DEFAULT_MODEL
from skillforge.errors import (
    AnalysisServiceError,
    EmptyResponseError,
    SchemaViolationError,
)
from skillforge.skills.models import ResourceType, SkillPackage
from skillforge.skills.schema import parse_package

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    package: SkillPackage
    raw_response: str


class IAnalysisGateway(ABC):
    @abstractmethod
    async def generate(self, data: bytes, mime_type: str, notes: str) -> AnalysisResult:
        """Analyze media and return a validated skill package.

        Raises AnalysisServiceError, EmptyResponseError or SchemaViolationError.
        """


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_package_response(raw_text: str | None) -> SkillPackage:
    if not raw_text or not raw_text.strip():
        raise EmptyResponseError("Analysis service returned no content")

    text = _strip_code_fence(raw_text)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.debug("[gateway] unparseable response (first 500 chars): %s", raw_text[:500])
        raise EmptyResponseError(f"Analysis response is not JSON ({exc})") from exc

    if not isinstance(payload, dict):
        raise SchemaViolationError(f"expected an object, got {type(payload).__name__}")
    return parse_package(payload)


RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "slug": types.Schema(
            type=types.Type.STRING,
            description="Folder name for the skill in hyphen-case, e.g. 'invoice-processor'.",
        ),
        "frontmatter": types.Schema(
            type=types.Type.OBJECT,
            properties={
                "name": types.Schema(type=types.Type.STRING, description="Display name."),
                "description": types.Schema(
                    type=types.Type.STRING,
                    description="When to use the skill, e.g. 'Use when the user needs to ...'.",
                ),
            },
            required=["name", "description"],
        ),
        "body": types.Schema(
            type=types.Type.STRING,
            description="Markdown body of SKILL.md without the frontmatter.",
        ),
        "resources": types.Schema(
            type=types.Type.ARRAY,
            description="Helper files extracted from the workflow.",
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "filename": types.Schema(type=types.Type.STRING),
                    "type": types.Schema(
                        type=types.Type.STRING,
                        enum=[item.value for item in ResourceType],
                    ),
                    "content": types.Schema(type=types.Type.STRING),
                    "language": types.Schema(
                        type=types.Type.STRING,
                        description="Language for syntax highlighting (python, markdown, ...).",
                    ),
                },
                required=["filename", "type", "content"],
            ),
        ),
    },
    required=["slug", "frontmatter", "body", "resources"],
)


class GeminiAnalysisGateway(IAnalysisGateway):
    def __init__(
        self,
        client: Any | None = None,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._api_key = api_key

    @classmethod
    def create_default(cls, settings: Settings) -> "GeminiAnalysisGateway":
        return cls(model=settings.model, api_key=settings.api_key)

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise AnalysisServiceError("GEMINI_API_KEY is not set")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    @property
    def model(self) -> str:
        return self._model

    def build_contents(self, data: bytes, mime_type: str, notes: str) -> list[types.Part]:
        return [
            types.Part.from_bytes(data=data, mime_type=mime_type),
            types.Part.from_text(text=get_skill_generation_prompt(notes)),
        ]

    async def generate(self, data: bytes, mime_type: str, notes: str) -> AnalysisResult:
        logger.info(
            "[gateway] submitting %d bytes of %s to %s", len(data), mime_type, self._model
        )
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=self._model,
                contents=self.build_contents(data, mime_type, notes),
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                ),
            )
        except Exception as exc:
            raise AnalysisServiceError(f"Analysis request failed: {exc}") from exc

        raw_text = self._extract_response_text(response)
        package = parse_package_response(raw_text)
        logger.info(
            "[gateway] received package %r with %d files", package.slug, package.file_count
        )
        return AnalysisResult(package=package, raw_response=raw_text)

    def _extract_response_text(self, response: Any) -> str:
        """Text of the first candidate, empty when the response was blocked."""
        try:
            return response.text or ""
        except (AttributeError, ValueError, KeyError, IndexError, TypeError) as exc:
            logger.debug("[gateway] response.text failed (%s), trying candidates", exc)
        for candidate in getattr(response, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            for part in getattr(content, "parts", None) or []:
                text = getattr(part, "text", None)
                if text:
                    return text
        return ""
