"""Nested pydantic-settings configuration for the application.

Each group reads its own ``CASESYNTH_<GROUP>_*`` env vars::

    export CASESYNTH_CONTENT_BACKEND=litellm
    export CASESYNTH_LLM_MODEL=ollama/qwen3-14b
    export CASESYNTH_PERSISTENCE_STORE_PATH=./records
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class LLMConfig(BaseSettings):
    """LLM backend configuration for generated text.

    Env vars use ``CASESYNTH_LLM_`` prefix::

        export CASESYNTH_LLM_PROVIDER=ollama
        export CASESYNTH_LLM_MODEL=ollama/qwen3-14b
    """

    model_config = {"env_prefix": "CASESYNTH_LLM_"}

    provider: Literal["bedrock", "openai", "ollama", "litellm", "anthropic"] = "ollama"
    base_url: str = "http://localhost:11434"
    api_key: str = "no-key"
    model: str = "ollama/qwen3-14b"
    temperature: float = 0.7
    max_tokens: int = 512
    timeout: float = 60.0
    max_retries: int = 3
    retry_jitter_factor: float = 0.5
    retry_max_delay: float = 30.0


class ContentConfig(BaseSettings):
    """Content generator configuration.

    Env vars use ``CASESYNTH_CONTENT_`` prefix. ``template`` needs no LLM
    and echoes the prompt, which is what the scripts did before an AI
    content API was wired in.
    """

    model_config = {"env_prefix": "CASESYNTH_CONTENT_"}

    backend: Literal["litellm", "template"] = "template"
    fallback_text: str = "Content unavailable."
    system_prompt: str = (
        "You write realistic but entirely fictional ticket text for test data. "
        "Reply with the requested text only."
    )


class PersistenceConfig(BaseSettings):
    """Record store configuration.

    Env vars use ``CASESYNTH_PERSISTENCE_`` prefix.
    """

    model_config = {"env_prefix": "CASESYNTH_PERSISTENCE_"}

    backend: Literal["file", "memory"] = "file"
    store_path: Path = Path("./records")


class ReferenceConfig(BaseSettings):
    """Default record ids used by the case catalog.

    Env vars use ``CASESYNTH_REFS_`` prefix. Defaults are the demo-instance
    sys_ids the platform ships with.
    """

    model_config = {"env_prefix": "CASESYNTH_REFS_"}

    incident_end_user: str = "62826bf03710200044e0bfc8bcbe5df1"
    configuration_item: str = "3a6cdbdbc0a8ce01008ef85f28b07a41"
    business_service: str = "26da329f0a0a0bb400f69d8159bc753d"
    incident_assignment_group: str = "287ebd7da9fe198100f92cc8d1d2154e"
    incident_location: str = "29a6c6bc0a0a0b5000d1f9d758c21531"
    csm_contact: str = "60beb5e7d7600200e5982cf65e6103ad"
    csm_account: str = "1b7346d4c6112276007f9d0efdb69cd2"
    csm_product: str = "9f8d1294c6112276007f9d0efdb69cdb"
    csm_agent: str = "46d44a5dc6112276007f9d0efdb69cd4"
    hr_opened_for: str = "3fc87b58931eca10800fb45e1dba105c"
    hr_subject_person: str = "3fc87b58931eca10800fb45e1dba105c"
    hr_assignment_group: str = "d625dccec0a8016700a222a0f7900d6c"
    hr_service: str = "e228cde49f331200d9011977677fcf05"
    change_assignment_group: str = "287ebd7da9fe198100f92cc8d1d2154e"
    agent_user: str = "a8f98bb0eb32010045e1a5115206fe3a"
    default_patient: str = ""

    # Identity notes fall back to when no author scope is active
    caller_identity: str = "system"

    def as_mapping(self) -> dict[str, str]:
        return self.model_dump()


class SynthesisConfig(BaseSettings):
    """Field resolution and per-case-type policy.

    Env vars use ``CASESYNTH_SYNTHESIS_`` prefix. The override maps are JSON::

        export CASESYNTH_SYNTHESIS_BATCH_OVERRIDES='{"change_request": true}'
    """

    model_config = {"env_prefix": "CASESYNTH_SYNTHESIS_"}

    timezone: str = "UTC"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    seed: Optional[int] = None
    batch_overrides: dict[str, bool] = Field(default_factory=dict)
    short_description_overrides: dict[str, bool] = Field(default_factory=dict)


class ObservabilityConfig(BaseSettings):
    """Observability configuration.

    Env vars use ``CASESYNTH_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "CASESYNTH_OBSERVABILITY_"}

    service_name: str = "case-synth"
    log_level: str = "INFO"


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs.

    Each sub-config reads its own ``CASESYNTH_<GROUP>_*`` env vars.
    """

    llm: LLMConfig = LLMConfig()
    content: ContentConfig = ContentConfig()
    persistence: PersistenceConfig = PersistenceConfig()
    refs: ReferenceConfig = ReferenceConfig()
    synthesis: SynthesisConfig = SynthesisConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
