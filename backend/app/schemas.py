from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator


class NumerologyCalculateRequest(BaseModel):
    """Civil-state data. The French field names of the web client are accepted too."""

    first_name: str | None = Field(
        default=None, max_length=200, validation_alias=AliasChoices("first_name", "prenom")
    )
    middle_names: str | None = Field(
        default=None, max_length=300, validation_alias=AliasChoices("middle_names", "secondPrenom")
    )
    family_name: str | None = Field(
        default=None, max_length=200, validation_alias=AliasChoices("family_name", "nomFamille")
    )
    marital_name: str | None = Field(
        default=None, max_length=200, validation_alias=AliasChoices("marital_name", "nomMarital")
    )
    birth_date: str | None = Field(
        default=None, max_length=32, validation_alias=AliasChoices("birth_date", "dateNaissance")
    )
    target_year: int | None = Field(
        default=None, ge=1, le=9999, validation_alias=AliasChoices("target_year", "targetYear")
    )
    include_debug: bool = Field(
        default=False, validation_alias=AliasChoices("include_debug", "includeDebug")
    )

    @field_validator("first_name", "middle_names", "family_name", "marital_name", "birth_date")
    @classmethod
    def strip_optional_strings(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class NumerologyInputsEcho(BaseModel):
    first_name: str
    middle_names: str
    family_name: str
    marital_name: str
    birth_date: str
    target_year: int


class YRuleMeta(BaseModel):
    rule: str
    overrides_applied: list[dict[str, str]]


class NumerologyThemeResponse(BaseModel):
    inputs: NumerologyInputsEcho
    computed: dict[str, Any]
    calc_lines: dict[str, list[str]]
    y_rule: YRuleMeta
    debug: dict[str, Any] | None = None


class NumerologyErrorResponse(BaseModel):
    detail: str
    code: str
