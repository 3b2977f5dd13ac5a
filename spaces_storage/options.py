"""Persisted backend settings and the configuration surface shown to operators."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError


class Region(str, Enum):
    NYC3 = "nyc3"
    AMS3 = "ams3"
    SFO2 = "sfo2"
    SFO3 = "sfo3"
    SGP1 = "sgp1"
    FRA1 = "fra1"
    BLR1 = "blr1"
    SYD1 = "syd1"


class ObjectAcl(str, Enum):
    PRIVATE = "private"
    PUBLIC_READ = "public-read"


class BackendSettings(BaseModel):
    """Plugin settings as persisted by the host.

    `secret_key` holds the encrypted token when loaded from storage and the
    plaintext (possibly blank) when coming from a submitted form.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="ignore")

    bucket: str = Field(min_length=1, max_length=63)
    region: Region = Region.NYC3
    acl: ObjectAcl = ObjectAcl.PRIVATE
    access_key: str = Field(
        min_length=1,
        max_length=64,
        validation_alias=AliasChoices("access_key", "access-key"),
    )
    secret_key: str = Field(
        default="",
        validation_alias=AliasChoices("secret_key", "secret-key"),
    )


@dataclass(frozen=True)
class FieldError:
    """A validation message; `field=None` marks a form-level error."""

    field: str | None
    message: str


@dataclass
class ValidationOutcome:
    settings: dict[str, Any]
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def errors_for(self, name: str | None) -> list[str]:
        return [e.message for e in self.errors if e.field == name]


def field_errors_from(exc: ValidationError) -> list[FieldError]:
    out: list[FieldError] = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        name = str(loc[0]).replace("-", "_") if loc else None
        out.append(FieldError(name, str(err.get("msg") or "Invalid value")))
    return out


FieldKind = Literal["text", "password", "choice", "section"]


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    kind: FieldKind = "text"
    required: bool = False
    choices: dict[str, str] = field(default_factory=dict)
    default: str | None = None
    length: int | None = None
    size: int | None = None


def get_options() -> list[FieldSpec]:
    """Describe the settings form in display order."""
    return [
        FieldSpec("bucket", "Bucket Name", size=40),
        FieldSpec(
            "region",
            "Region",
            kind="choice",
            choices={r.value: r.value.upper() for r in Region},
            default=Region.NYC3.value,
        ),
        FieldSpec(
            "acl",
            "Object ACL",
            kind="choice",
            choices={ObjectAcl.PRIVATE.value: "Private", ObjectAcl.PUBLIC_READ.value: "Public Read"},
            default=ObjectAcl.PRIVATE.value,
        ),
        FieldSpec("credentials", "Credentials", kind="section"),
        FieldSpec("access_key", "Access Key", required=True, length=64, size=40),
        # Blank on update keeps the stored secret.
        FieldSpec("secret_key", "Secret Key", kind="password", length=64, size=40),
    ]
