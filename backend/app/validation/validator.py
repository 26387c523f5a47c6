"""Document validation and the publish gate.

Every check is a pure function over the typed document and returns a list of
issues; ``validate_document`` aggregates them and derives the status.
Disabled components are skipped entirely. Paths keep the component's index in
its original list so toggling one component never moves another's issues.
"""

from collections.abc import Sequence

from backend.app.models.actions import Action, MessageAction, ShareAction, UriAction
from backend.app.models.common import CheckLevel, ExternalImage, UploadedImage
from backend.app.models.components import (
    BodyComponent,
    Divider,
    FooterButton,
    HeroComponent,
    HeroImage,
    HeroVideo,
    KeyValueRow,
    ListBlock,
    ParagraphText,
    Spacer,
    TitleText,
)
from backend.app.models.document import (
    BubbleDoc,
    CarouselDoc,
    FolderDoc,
    Section,
    SpecialSection,
)
from backend.app.models.validation import (
    DocumentStatus,
    IssueLevel,
    PublishGateResult,
    ValidationIssue,
    ValidationReport,
)
from backend.app.utils.colors import is_hex_color, is_hex_color_with_alpha
from backend.app.validation import limits

# Warnings meaning "cannot confirm the platform can fetch this image".
# They keep a document previewable and become errors at publish time.
PUBLISH_ESCALATIONS = {"W_IMAGE_PUBLISH_BLOCK": "E_IMAGE_PUBLISH_BLOCK"}


def _error(code: str, message: str, path: str) -> ValidationIssue:
    return ValidationIssue(code=code, level=IssueLevel.ERROR, message=message, path=path)


def _warn(code: str, message: str, path: str) -> ValidationIssue:
    return ValidationIssue(code=code, level=IssueLevel.WARN, message=message, path=path)


def _blank(value: str | None) -> bool:
    return not value or not value.strip()


def _color_warning(value: str | None, path: str) -> list[ValidationIssue]:
    if value and not is_hex_color(value):
        return [_warn("W_COLOR_FORMAT", "Use a #RRGGBB color.", path)]
    return []


def is_allowed_uri(uri: str) -> bool:
    """True when the link starts with an allow-listed scheme; surrounding whitespace fails."""
    if uri != uri.strip():
        return False
    lowered = uri.lower()
    return any(lowered.startswith(prefix) for prefix in limits.ALLOWED_URI_PREFIXES)


def image_publish_confirmed(image: UploadedImage | ExternalImage) -> bool:
    """Whether the platform can be trusted to fetch this image.

    Uploads must be served over HTTPS. External images must not have failed
    their last reachability check and must be HTTPS or same-origin paths.
    """
    if isinstance(image, UploadedImage):
        return image.url.startswith("https://")
    if image.last_check is not None and image.last_check.level == CheckLevel.FAIL:
        return False
    return image.url.startswith("https://") or image.url.startswith("/")


def select_hero(hero: Sequence[HeroComponent]) -> tuple[int, HeroImage | HeroVideo] | None:
    """Pick the one hero that renders.

    The first enabled image wins; otherwise the first enabled video.

    Returns:
        (index in the hero list, component) or None when nothing is enabled
    """
    for i, item in enumerate(hero):
        if item.enabled and isinstance(item, HeroImage):
            return i, item
    for i, item in enumerate(hero):
        if item.enabled and isinstance(item, HeroVideo):
            return i, item
    return None


def verify_action(action: Action | None, path: str) -> list[ValidationIssue]:
    """Check one tap action.

    Args:
        action: Action to check (None reports a missing action)
        path: Path of the action node itself

    Returns:
        List of errors (empty when the action is well formed)
    """
    match action:
        case None:
            return [_error("E_ACTION_REQUIRED", "An action is required.", path)]
        case UriAction(uri=uri):
            if _blank(uri):
                return [_error("E_ACTION_URI_INVALID", "The link is empty or malformed.", f"{path}.uri")]
            if not is_allowed_uri(uri):
                return [
                    _error(
                        "E_ACTION_URI_PROTOCOL",
                        "Links must start with https://, http://, line://, liff:// or tel:.",
                        f"{path}.uri",
                    )
                ]
            if len(uri) > limits.URI_MAX:
                return [
                    _error(
                        "E_URI_TOO_LONG",
                        f"Links are limited to {limits.URI_MAX} characters.",
                        f"{path}.uri",
                    )
                ]
            return []
        case MessageAction(text=text):
            if _blank(text):
                return [_error("E_MESSAGE_TEXT_REQUIRED", "Message text is required.", f"{path}.text")]
            return []
        case ShareAction():
            # Resolved by the compiler; nothing the author can get wrong
            return []


def verify_footer(footer: Sequence[FooterButton], base: str) -> list[ValidationIssue]:
    """Verify footer buttons.

    Checks:
    1. At most 3 enabled buttons
    2. Each enabled button has a label within 20 characters
    3. Each enabled button has a well-formed action
    4. Button colors are #RRGGBB (warning only)

    Args:
        footer: Footer buttons in document order
        base: Path of the footer list

    Returns:
        List of issues (errors and warnings)
    """
    issues: list[ValidationIssue] = []

    enabled_count = sum(1 for b in footer if b.enabled)
    if enabled_count > limits.FOOTER_MAX_BUTTONS:
        issues.append(
            _error(
                "E_FOOTER_TOO_MANY_BUTTONS",
                f"A footer holds at most {limits.FOOTER_MAX_BUTTONS} buttons.",
                base,
            )
        )

    for i, button in enumerate(footer):
        if not button.enabled:
            continue
        path = f"{base}[{i}]"

        if _blank(button.label):
            issues.append(_error("E_TEXT_REQUIRED", "Button label is required.", f"{path}.label"))
        elif len(button.label) > limits.BUTTON_LABEL_MAX:
            issues.append(
                _error(
                    "E_BUTTON_LABEL_TOO_LONG",
                    f"Button labels are limited to {limits.BUTTON_LABEL_MAX} characters.",
                    f"{path}.label",
                )
            )

        issues.extend(verify_action(button.action, f"{path}.action"))
        issues.extend(_color_warning(button.bg_color, f"{path}.bgColor"))
        issues.extend(_color_warning(button.text_color, f"{path}.textColor"))

    return issues


def verify_component(component: BodyComponent, path: str) -> list[ValidationIssue]:
    """Per-kind required-field and length checks for one body component."""
    issues: list[ValidationIssue] = []

    match component:
        case TitleText():
            if _blank(component.text):
                issues.append(_error("E_TITLE_EMPTY", "Title text is required.", f"{path}.text"))
            elif len(component.text) > limits.TITLE_MAX:
                issues.append(
                    _error(
                        "E_TITLE_TOO_LONG",
                        f"Titles are limited to {limits.TITLE_MAX} characters.",
                        f"{path}.text",
                    )
                )
            issues.extend(_color_warning(component.color, f"{path}.color"))
        case ParagraphText():
            if _blank(component.text):
                issues.append(_error("E_PARAGRAPH_EMPTY", "Paragraph text is required.", f"{path}.text"))
            elif len(component.text) > limits.TEXT_MAX:
                issues.append(
                    _error(
                        "E_PARAGRAPH_TOO_LONG",
                        f"Paragraphs are limited to {limits.TEXT_MAX} characters.",
                        f"{path}.text",
                    )
                )
            issues.extend(_color_warning(component.color, f"{path}.color"))
        case KeyValueRow():
            if _blank(component.label):
                issues.append(_error("E_KV_LABEL_EMPTY", "Label is required.", f"{path}.label"))
            elif len(component.label) > limits.KEY_VALUE_LABEL_MAX:
                issues.append(
                    _warn(
                        "W_KV_LABEL_LONG",
                        f"Keep labels within {limits.KEY_VALUE_LABEL_MAX} characters.",
                        f"{path}.label",
                    )
                )
            if _blank(component.value):
                issues.append(_error("E_KV_VALUE_EMPTY", "Value is required.", f"{path}.value"))
            elif len(component.value) > limits.KEY_VALUE_VALUE_MAX:
                issues.append(
                    _warn(
                        "W_KV_VALUE_LONG",
                        f"Keep values within {limits.KEY_VALUE_VALUE_MAX} characters.",
                        f"{path}.value",
                    )
                )
            if component.action is not None:
                issues.extend(verify_action(component.action, f"{path}.action"))
        case ListBlock() | Divider() | Spacer():
            pass

    return issues


def verify_body(body: Sequence[BodyComponent], base: str) -> list[ValidationIssue]:
    """Verify every enabled body component in document order."""
    issues: list[ValidationIssue] = []
    for i, component in enumerate(body):
        if component.enabled:
            issues.extend(verify_component(component, f"{base}[{i}]"))
    return issues


def verify_hero(hero: Sequence[HeroComponent], base: str, *, require_hero: bool) -> list[ValidationIssue]:
    """Verify the hero that will render.

    Checks:
    1. Carousel cards must have an enabled hero
    2. Hero images must be publish-confirmed (warning, escalated at publish)
    3. Hero videos need HTTPS video and preview URLs

    Args:
        hero: Hero components of the section
        base: Path of the hero list
        require_hero: Whether a missing hero is an error

    Returns:
        List of issues
    """
    selected = select_hero(hero)
    if selected is None:
        if require_hero:
            return [_error("E_HERO_REQUIRED", "Every card needs a hero image or video.", base)]
        return []

    index, item = selected
    path = f"{base}[{index}]"
    issues: list[ValidationIssue] = []

    match item:
        case HeroImage(image=image):
            if not image_publish_confirmed(image):
                issues.append(
                    _warn(
                        "W_IMAGE_PUBLISH_BLOCK",
                        "This image cannot be confirmed as reachable (preview only, not publishable).",
                        f"{path}.image",
                    )
                )
        case HeroVideo(video=video):
            if _blank(video.url):
                issues.append(_error("E_VIDEO_URL_REQUIRED", "Video URL is required.", f"{path}.video.url"))
            elif not video.url.startswith("https://"):
                issues.append(_error("E_VIDEO_URL_HTTPS", "Video URL must use HTTPS.", f"{path}.video.url"))

            if _blank(video.preview_url):
                issues.append(
                    _error(
                        "E_VIDEO_PREVIEW_REQUIRED",
                        "Video preview image is required.",
                        f"{path}.video.previewUrl",
                    )
                )
            elif not video.preview_url.startswith("https://"):
                issues.append(
                    _error(
                        "E_VIDEO_PREVIEW_HTTPS",
                        "Video preview image must use HTTPS.",
                        f"{path}.video.previewUrl",
                    )
                )

    return issues


def verify_special_section(section: SpecialSection, base: str) -> list[ValidationIssue]:
    """Verify a full-bleed card: background image, overlay color and body."""
    issues: list[ValidationIssue] = []

    if not image_publish_confirmed(section.image):
        issues.append(
            _warn(
                "W_IMAGE_PUBLISH_BLOCK",
                "This image cannot be confirmed as reachable (preview only, not publishable).",
                f"{base}.image",
            )
        )

    color = section.overlay.background_color
    if color and not is_hex_color_with_alpha(color):
        issues.append(
            _warn(
                "W_COLOR_FORMAT",
                "Use a #RRGGBB or #RRGGBBAA color.",
                f"{base}.overlay.backgroundColor",
            )
        )

    issues.extend(verify_body(section.body, f"{base}.body"))
    return issues


def verify_section(section: Section | SpecialSection, base: str, *, require_hero: bool) -> list[ValidationIssue]:
    """Verify one card section of either kind."""
    match section:
        case SpecialSection():
            return verify_special_section(section, base)
        case Section():
            issues = verify_hero(section.hero, f"{base}.hero", require_hero=require_hero)
            issues.extend(verify_body(section.body, f"{base}.body"))
            issues.extend(verify_footer(section.footer, f"{base}.footer"))
            return issues


def verify_bubble_size(doc: BubbleDoc) -> list[ValidationIssue]:
    """A bubble whose rendered hero is a video must be kilo, mega or giga."""
    selected = select_hero(doc.section.hero)
    if selected is None or not isinstance(selected[1], HeroVideo):
        return []
    if doc.bubble_size in limits.VIDEO_BUBBLE_SIZES:
        return []
    return [
        _error(
            "E_VIDEO_BUBBLE_SIZE",
            "A bubble with a video hero must use size kilo, mega or giga.",
            "bubbleSize",
        )
    ]


def verify_carousel(doc: CarouselDoc) -> list[ValidationIssue]:
    """Carousel-level checks: card count and the video exclusion.

    Any enabled video hero in a carousel card is an error, whatever else the
    card contains.
    """
    issues: list[ValidationIssue] = []

    if len(doc.cards) < 1:
        issues.append(_error("E_CAROUSEL_EMPTY", "A carousel needs at least 1 card.", "cards"))
    if len(doc.cards) > limits.CAROUSEL_MAX_CARDS:
        issues.append(
            _error(
                "E_CAROUSEL_TOO_MANY",
                f"A carousel holds at most {limits.CAROUSEL_MAX_CARDS} cards.",
                "cards",
            )
        )

    for i, card in enumerate(doc.cards):
        if not isinstance(card.section, Section):
            continue
        for j, item in enumerate(card.section.hero):
            if item.enabled and isinstance(item, HeroVideo):
                issues.append(
                    _error(
                        "E_VIDEO_IN_CAROUSEL",
                        "Videos are not supported inside carousels; use a single bubble.",
                        f"cards[{i}].section.hero[{j}]",
                    )
                )

    return issues


def _status_for(errors: list[ValidationIssue], warnings: list[ValidationIssue]) -> DocumentStatus:
    if errors:
        return DocumentStatus.DRAFT
    if any(w.code in PUBLISH_ESCALATIONS for w in warnings):
        return DocumentStatus.PREVIEWABLE
    return DocumentStatus.PUBLISHABLE


def validate_document(doc: BubbleDoc | CarouselDoc | FolderDoc) -> ValidationReport:
    """Validate a document and compute its publish readiness.

    Never raises for malformed content; every problem becomes an issue.

    Args:
        doc: Document to validate

    Returns:
        Report with errors, warnings and derived status
    """
    issues: list[ValidationIssue] = []

    match doc:
        case FolderDoc():
            return ValidationReport(status=DocumentStatus.PUBLISHABLE)
        case BubbleDoc():
            issues.extend(verify_section(doc.section, "section", require_hero=False))
            issues.extend(verify_bubble_size(doc))
        case CarouselDoc():
            issues.extend(verify_carousel(doc))
            for i, card in enumerate(doc.cards):
                issues.extend(verify_section(card.section, f"cards[{i}].section", require_hero=True))

    errors = [i for i in issues if i.level == IssueLevel.ERROR]
    warnings = [i for i in issues if i.level == IssueLevel.WARN]

    return ValidationReport(status=_status_for(errors, warnings), errors=errors, warnings=warnings)


def is_publishable(doc: BubbleDoc | CarouselDoc | FolderDoc) -> PublishGateResult:
    """Publish gate: revalidate and escalate unconfirmed-image warnings to errors.

    Always reruns validation; cached reports may predate a changed image check.
    """
    report = validate_document(doc)
    errors = list(report.errors)

    for warning in report.warnings:
        escalated = PUBLISH_ESCALATIONS.get(warning.code)
        if escalated is not None:
            errors.append(warning.model_copy(update={"code": escalated, "level": IssueLevel.ERROR}))

    return PublishGateResult(ok=not errors, errors=errors)
