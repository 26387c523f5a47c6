"""Common types and enums shared across document models."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

LayoutAlign = Literal["start", "center", "end"]
SizeToken = Literal["xs", "sm", "md", "lg", "xl"]
SpacerSize = Literal["sm", "md", "lg"]
BubbleSize = Literal["nano", "micro", "kilo", "mega", "giga"]
ImgRatio = Literal["1:1", "16:9", "4:3", "20:13"]
SpecialRatio = Literal["1:1", "16:9", "4:3", "20:13", "2:3", "9:16"]
ImgMode = Literal["cover", "contain"]
FontWeight = Literal["regular", "bold"]
OverlayHeight = Literal["auto", "30%", "40%", "50%", "60%", "70%"]


class CamelModel(BaseModel):
    """Base for document models stored and exchanged as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump to the camelCase JSON shape used by the editor and the store."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CheckLevel(str, Enum):
    """Outcome level of an image reachability check."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class ImageCheckResult(CamelModel):
    """Cached result of the out-of-core image reachability probe."""

    ok: bool
    level: CheckLevel
    reason_code: str | None = None
    checked_at: datetime | None = None
    # Probe diagnostics, absent when no response was received
    status: int | None = None
    content_type: str | None = None
    content_length: int | None = None


class UploadedImage(CamelModel):
    """Image uploaded to the hosted asset store."""

    kind: Literal["upload"] = "upload"
    asset_id: str
    url: str


class ExternalImage(CamelModel):
    """Image linked from an external host, probed for reachability."""

    kind: Literal["external"] = "external"
    url: str
    last_check: ImageCheckResult | None = None


ImageSource = Annotated[UploadedImage | ExternalImage, Field(discriminator="kind")]


class UploadedVideo(CamelModel):
    """Video uploaded together with its preview frame."""

    kind: Literal["upload"] = "upload"
    asset_id: str
    url: str = ""
    preview_asset_id: str = ""
    preview_url: str = ""


class ExternalVideo(CamelModel):
    """Video linked from an external host."""

    kind: Literal["external"] = "external"
    url: str = ""
    preview_url: str = ""


VideoSource = Annotated[UploadedVideo | ExternalVideo, Field(discriminator="kind")]
