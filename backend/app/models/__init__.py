"""Models package - re-exports for convenience."""

from backend.app.models.actions import Action, MessageAction, ShareAction, UriAction
from backend.app.models.common import (
    CheckLevel,
    ExternalImage,
    ExternalVideo,
    ImageCheckResult,
    UploadedImage,
    UploadedVideo,
)
from backend.app.models.components import (
    Divider,
    FooterButton,
    HeroImage,
    HeroVideo,
    KeyValueRow,
    ListBlock,
    ListItem,
    ParagraphText,
    Spacer,
    TitleText,
)
from backend.app.models.document import (
    BubbleDoc,
    Card,
    CarouselDoc,
    FolderDoc,
    OverlayConfig,
    Section,
    SpecialSection,
    parse_document,
)
from backend.app.models.validation import (
    DocumentStatus,
    IssueLevel,
    PublishGateResult,
    ValidationIssue,
    ValidationReport,
)
from backend.app.models.wire import FlexMessage

__all__ = [
    # Common
    "CheckLevel",
    "ImageCheckResult",
    "UploadedImage",
    "ExternalImage",
    "UploadedVideo",
    "ExternalVideo",
    # Actions
    "Action",
    "UriAction",
    "MessageAction",
    "ShareAction",
    # Components
    "HeroImage",
    "HeroVideo",
    "TitleText",
    "ParagraphText",
    "KeyValueRow",
    "ListBlock",
    "ListItem",
    "Divider",
    "Spacer",
    "FooterButton",
    # Documents
    "Section",
    "SpecialSection",
    "OverlayConfig",
    "Card",
    "BubbleDoc",
    "CarouselDoc",
    "FolderDoc",
    "parse_document",
    # Validation
    "IssueLevel",
    "DocumentStatus",
    "ValidationIssue",
    "ValidationReport",
    "PublishGateResult",
    # Wire
    "FlexMessage",
]
