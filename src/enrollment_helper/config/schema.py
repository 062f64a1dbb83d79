"""Pydantic models for Enrollment Helper configuration.

Nested section models use plain ``BaseModel``.  Only the top-level
:class:`EnrollmentConfig` extends ``BaseSettings``, and its environment
sources are switched off: the wizard reads no environment variables, so
the only inputs are defaults and an explicit ``--config`` file.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


class CommandSection(BaseModel):
    """Privileged command and escalation wrapper."""

    executable: str = "/usr/local/bin/jamf"
    subcommand: str = "recon"
    shell: str = "/bin/zsh"
    escalation: list[str] = Field(default_factory=lambda: ["sudo", "-S", "-k", "-p", ""])

    @field_validator("executable", "shell")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class TagsSection(BaseModel):
    """Prefixes and special cases applied to the collected metadata."""

    building_prefix: str = "NCSU-"
    department_prefix: str = "COS-"
    other_department_group: str = "COS-Other"
    department_overrides: dict[str, str] = Field(
        default_factory=lambda: {"Dean's Office": "DEANS-OFFICE"}
    )


class CatalogSection(BaseModel):
    """Reference table location and catch-all labels."""

    path: str | None = None
    other_building: str = "Other"
    other_department: str = "Other COS Department"

    def get_path(self) -> Path | None:
        """Return the resolved reference table path, or ``None`` for packaged data."""
        return Path(self.path).expanduser() if self.path else None


class UiSection(BaseModel):
    """Operator-facing text."""

    title: str = "College of Sciences"
    acknowledge_message: str = (
        "This process is a mandatory step for the computer to function correctly."
    )
    submitting_message: str = (
        "Submitting info, please wait. Approve any pop-up notifications "
        'associated with "jamf" or "terminal".'
    )


class EnrollmentConfig(BaseSettings):
    """Top-level Enrollment Helper configuration model.

    Maps to the TOML structure:
        [command] / [tags] / [catalog] / [ui]

    All fields are optional with defaults matching the College of
    Sciences deployment.
    """

    command: CommandSection = Field(default_factory=CommandSection)
    tags: TagsSection = Field(default_factory=TagsSection)
    catalog: CatalogSection = Field(default_factory=CatalogSection)
    ui: UiSection = Field(default_factory=UiSection)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)
