# Copyright 2025 KTTC AI (https://github.com/kttc-ai)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""App-level configuration for context-aware translation."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Tone(str, Enum):
    """Desired tone for translations."""

    FRIENDLY = "friendly"
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    FORMAL = "formal"
    TECHNICAL = "technical"

    @property
    def description(self) -> str:
        """Human-readable description for prompts."""
        return TONE_DESCRIPTIONS[self]


class FormalityLevel(str, Enum):
    """Formality level for translations."""

    INFORMAL = "informal"
    NEUTRAL = "neutral"
    FORMAL = "formal"

    @property
    def description(self) -> str:
        """Human-readable description for prompts."""
        return FORMALITY_DESCRIPTIONS[self]


TONE_DESCRIPTIONS: dict[Tone, str] = {
    Tone.FRIENDLY: "Friendly and approachable",
    Tone.PROFESSIONAL: "Professional and businesslike",
    Tone.CASUAL: "Casual and conversational",
    Tone.FORMAL: "Formal and polished",
    Tone.TECHNICAL: "Technical and precise",
}

FORMALITY_DESCRIPTIONS: dict[FormalityLevel, str] = {
    FormalityLevel.INFORMAL: "Informal (use casual pronouns like 'tu' in French)",
    FormalityLevel.NEUTRAL: "Neutral (context-appropriate formality)",
    FormalityLevel.FORMAL: "Formal (use polite pronouns like 'vous' in French)",
}


class ContextConfiguration(BaseModel):
    """Configuration for context-aware translation.

    The three ``*_enabled`` flags switch the context sources independently.
    """

    model_config = ConfigDict(frozen=True)

    app_name: str = Field(..., description="App name")
    app_description: str = Field(default="", description="Brief description of the app")
    domain: str = Field(default="", description="Domain, e.g. automotive, fitness, finance")
    tone: Tone = Field(default=Tone.FRIENDLY, description="Desired tone")
    formality: FormalityLevel = Field(default=FormalityLevel.NEUTRAL, description="Formality")
    project_path: Path | None = Field(default=None, description="Project source root")
    source_code_analysis_enabled: bool = True
    translation_memory_enabled: bool = True
    glossary_enabled: bool = True

    def build_app_context(self) -> str:
        """Build app context string for LLM prompts."""
        parts = [f"App: {self.app_name}"]

        if self.domain:
            parts.append(f"Domain: {self.domain}")
        if self.app_description:
            parts.append(f"Description: {self.app_description}")

        parts.append(f"Tone: {self.tone.description}")
        parts.append(f"Formality: {self.formality.description}")

        return "\n".join(parts)

    @classmethod
    def default(cls) -> ContextConfiguration:
        """Default configuration for a generic app."""
        return cls(app_name="App")

    @classmethod
    def professional(cls, app_name: str, description: str = "") -> ContextConfiguration:
        """Configuration for a professional/business app."""
        return cls(
            app_name=app_name,
            app_description=description,
            domain="business",
            tone=Tone.PROFESSIONAL,
            formality=FormalityLevel.FORMAL,
        )

    @classmethod
    def casual(cls, app_name: str, description: str = "") -> ContextConfiguration:
        """Configuration for a casual/consumer app."""
        return cls(
            app_name=app_name,
            app_description=description,
            domain="consumer",
            tone=Tone.CASUAL,
            formality=FormalityLevel.INFORMAL,
        )
