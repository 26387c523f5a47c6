"""Compile context - externally resolved values the compiler cannot produce."""

from dataclasses import dataclass, field
from typing import Literal

from backend.app.config import Settings


@dataclass(frozen=True)
class ShareLinkConfig:
    """Where share deep links point."""

    liff_id: str | None = None
    link_style: Literal["liff_web", "line_scheme"] = "liff_web"
    app_base_url: str | None = None


@dataclass(frozen=True)
class CompileContext:
    """Inputs to a compile besides the document itself.

    Token minting and id assignment happen outside the compiler; it only reads
    what is supplied here.
    """

    doc_id: str | None = None
    share_token: str | None = None
    alt_text: str | None = None
    asset_base_url: str | None = None
    share_links: ShareLinkConfig = field(default_factory=ShareLinkConfig)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        doc_id: str | None = None,
        share_token: str | None = None,
        alt_text: str | None = None,
    ) -> "CompileContext":
        """Build a context from application settings plus per-call values."""
        return cls(
            doc_id=doc_id,
            share_token=share_token,
            alt_text=alt_text,
            asset_base_url=settings.asset_base_url,
            share_links=ShareLinkConfig(
                liff_id=settings.liff_id,
                link_style=settings.share_link_style,
                app_base_url=settings.app_base_url,
            ),
        )
