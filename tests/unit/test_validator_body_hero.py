"""Tests for body component and hero verification."""

from backend.app.models import (
    CheckLevel,
    ExternalImage,
    ExternalVideo,
    HeroImage,
    HeroVideo,
    ImageCheckResult,
    KeyValueRow,
    ParagraphText,
    TitleText,
    UploadedImage,
    UriAction,
)
from backend.app.validation.validator import image_publish_confirmed, select_hero, verify_body, verify_hero


def make_image_hero(url: str = "https://cdn.example.com/a.png", level: CheckLevel | None = None, **kwargs) -> HeroImage:
    last_check = ImageCheckResult(ok=level != CheckLevel.FAIL, level=level) if level else None
    return HeroImage(id=kwargs.pop("id", "img"), image=ExternalImage(url=url, last_check=last_check), **kwargs)


def make_video_hero(url: str = "https://cdn.example.com/v.mp4", preview_url: str = "https://cdn.example.com/v.jpg", **kwargs) -> HeroVideo:
    return HeroVideo(id=kwargs.pop("id", "vid"), video=ExternalVideo(url=url, preview_url=preview_url), **kwargs)


def codes(issues: list) -> list[str]:
    return [i.code for i in issues]


class TestBody:
    """Test body component checks."""

    def test_empty_title(self) -> None:
        """Test that a blank title reports E_TITLE_EMPTY at its text path."""
        issues = verify_body([TitleText(id="t", text="")], "section.body")

        assert codes(issues) == ["E_TITLE_EMPTY"]
        assert issues[0].path == "section.body[0].text"

    def test_title_too_long(self) -> None:
        """Test the 400-character title ceiling."""
        assert codes(verify_body([TitleText(id="t", text="x" * 401)], "b")) == ["E_TITLE_TOO_LONG"]
        assert verify_body([TitleText(id="t", text="x" * 400)], "b") == []

    def test_paragraph_limits(self) -> None:
        """Test paragraph empty and 2000-character checks."""
        assert codes(verify_body([ParagraphText(id="p", text="")], "b")) == ["E_PARAGRAPH_EMPTY"]
        assert codes(verify_body([ParagraphText(id="p", text="x" * 2001)], "b")) == ["E_PARAGRAPH_TOO_LONG"]

    def test_key_value_required_fields(self) -> None:
        """Test that label and value are both required."""
        issues = verify_body([KeyValueRow(id="kv", label="", value="")], "b")

        assert codes(issues) == ["E_KV_LABEL_EMPTY", "E_KV_VALUE_EMPTY"]
        assert [i.path for i in issues] == ["b[0].label", "b[0].value"]

    def test_key_value_long_fields_warn(self) -> None:
        """Test that long labels and values only warn."""
        issues = verify_body([KeyValueRow(id="kv", label="l" * 41, value="v" * 301)], "b")

        assert codes(issues) == ["W_KV_LABEL_LONG", "W_KV_VALUE_LONG"]
        assert all(i.level == "warn" for i in issues)

    def test_key_value_action_optional_but_checked(self) -> None:
        """Test that a key/value action is only checked when present."""
        assert verify_body([KeyValueRow(id="kv", label="a", value="b")], "b") == []

        issues = verify_body([KeyValueRow(id="kv", label="a", value="b", action=UriAction(uri="javascript:x"))], "b")
        assert codes(issues) == ["E_ACTION_URI_PROTOCOL"]
        assert issues[0].path == "b[0].action.uri"

    def test_disabled_component_skipped_and_paths_stable(self) -> None:
        """Test that disabling one component leaves other components' paths unchanged."""
        body = [
            TitleText(id="t", text="", enabled=False),
            ParagraphText(id="p", text=""),
        ]
        issues = verify_body(body, "section.body")

        assert codes(issues) == ["E_PARAGRAPH_EMPTY"]
        assert issues[0].path == "section.body[1].text"


class TestHero:
    """Test hero selection and checks."""

    def test_select_prefers_image_over_earlier_video(self) -> None:
        """Test that an enabled image wins even when a video comes first."""
        hero = [make_video_hero(), make_image_hero()]
        selected = select_hero(hero)

        assert selected is not None
        assert selected[0] == 1
        assert isinstance(selected[1], HeroImage)

    def test_select_skips_disabled(self) -> None:
        """Test that disabled heroes are never selected."""
        assert select_hero([make_image_hero(enabled=False)]) is None

    def test_missing_hero_only_required_for_cards(self) -> None:
        """Test E_HERO_REQUIRED applies only when the caller requires a hero."""
        assert verify_hero([], "section.hero", require_hero=False) == []

        issues = verify_hero([], "cards[0].section.hero", require_hero=True)
        assert codes(issues) == ["E_HERO_REQUIRED"]
        assert issues[0].path == "cards[0].section.hero"

    def test_failed_check_warns(self) -> None:
        """Test that a failed reachability check is a publish-blocking warning."""
        issues = verify_hero([make_image_hero(level=CheckLevel.FAIL)], "section.hero", require_hero=False)

        assert codes(issues) == ["W_IMAGE_PUBLISH_BLOCK"]
        assert issues[0].level == "warn"
        assert issues[0].path == "section.hero[0].image"

    def test_non_https_external_image_warns(self) -> None:
        """Test that a plain-HTTP external image cannot be confirmed."""
        issues = verify_hero([make_image_hero(url="http://example.com/a.png")], "h", require_hero=False)
        assert codes(issues) == ["W_IMAGE_PUBLISH_BLOCK"]

    def test_video_requirements(self) -> None:
        """Test each video requirement has its own code and path."""
        missing = verify_hero([make_video_hero(url="", preview_url="")], "section.hero", require_hero=False)
        assert codes(missing) == ["E_VIDEO_URL_REQUIRED", "E_VIDEO_PREVIEW_REQUIRED"]
        assert [i.path for i in missing] == ["section.hero[0].video.url", "section.hero[0].video.previewUrl"]

        insecure = verify_hero(
            [make_video_hero(url="http://x/v.mp4", preview_url="http://x/v.jpg")], "section.hero", require_hero=False
        )
        assert codes(insecure) == ["E_VIDEO_URL_HTTPS", "E_VIDEO_PREVIEW_HTTPS"]


class TestImagePublishConfirmed:
    """Test the publish-confirmation rule for image sources."""

    def test_upload_requires_https(self) -> None:
        assert image_publish_confirmed(UploadedImage(asset_id="a", url="https://cdn.example.com/a.png"))
        assert not image_publish_confirmed(UploadedImage(asset_id="a", url="/local.png"))

    def test_external_same_origin_path_ok(self) -> None:
        assert image_publish_confirmed(ExternalImage(url="/placeholder.svg"))

    def test_external_warn_check_still_confirmed(self) -> None:
        image = ExternalImage(
            url="https://cdn.example.com/big.png",
            last_check=ImageCheckResult(ok=True, level=CheckLevel.WARN, reason_code="TOO_LARGE"),
        )
        assert image_publish_confirmed(image)
