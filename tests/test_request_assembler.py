"""
Tests for the Request Assembler.

Tests cover:
- Part ordering for every image combination
- Exactly one text part, always last
- Mask dropped when there is no source
- Reference position and reference wording staying in step
- Image config
"""

import pytest

from NS_Libs.GenerationLib.generation_settings import AspectRatio, GenerationSettings, ImageSize
from NS_Libs.GenerationLib.request_assembler import (
    ImageConfig,
    ImagePart,
    ImageRole,
    TextPart,
    assemble_request,
)


class TestPartOrdering:
    """Tests for positional ordering of request parts."""

    def test_text_only(self, settings):
        request = assemble_request(settings)

        assert len(request.parts) == 1
        assert isinstance(request.parts[0], TextPart)
        assert request.text == "A red fox in the snow"

    def test_source_mask_reference(self, settings, source_payload, mask_payload, reference_payload):
        request = assemble_request(
            settings,
            source=source_payload,
            mask=mask_payload,
            reference=reference_payload,
        )

        assert request.roles == (ImageRole.SOURCE, ImageRole.MASK, ImageRole.REFERENCE)
        assert isinstance(request.parts[-1], TextPart)
        assert request.parts[0].data == source_payload.data
        assert request.parts[1].data == mask_payload.data
        assert request.parts[2].data == reference_payload.data

    def test_reference_only(self, settings, reference_payload):
        request = assemble_request(settings, reference=reference_payload)

        assert request.roles == (ImageRole.REFERENCE,)
        assert request.parts[0].mime_type == "image/jpeg"
        assert request.text.startswith("Use the provided image as a visual reference.")

    def test_source_only(self, settings, source_payload):
        request = assemble_request(settings, source=source_payload)

        assert request.roles == (ImageRole.SOURCE,)
        assert request.text == "Edit the provided image. A red fox in the snow"

    def test_mask_without_source_is_dropped(self, settings, mask_payload):
        request = assemble_request(settings, mask=mask_payload)

        assert request.roles == ()
        assert "mask" not in request.text

    def test_exactly_one_text_part(self, settings, source_payload, mask_payload, reference_payload):
        request = assemble_request(settings, source_payload, mask_payload, reference_payload)

        text_parts = [p for p in request.parts if isinstance(p, TextPart)]
        assert len(text_parts) == 1
        assert request.parts[-1] is text_parts[0]

    def test_parts_are_immutable(self, settings, source_payload):
        request = assemble_request(settings, source=source_payload)

        assert isinstance(request.parts, tuple)
        with pytest.raises(AttributeError):
            request.parts[0].role = ImageRole.MASK


class TestReferencePositionMatchesWording:
    """The reference is the last image exactly when the text says so."""

    @pytest.mark.parametrize("with_mask", [False, True])
    def test_reference_after_source_is_last_image(
        self, settings, source_payload, mask_payload, reference_payload, with_mask
    ):
        request = assemble_request(
            settings,
            source=source_payload,
            mask=mask_payload if with_mask else None,
            reference=reference_payload,
        )

        assert request.image_parts[-1].role is ImageRole.REFERENCE
        assert "Use the last provided image as a strict style/content reference." in request.text

    def test_mask_clause_matches_mask_position(self, settings, source_payload, mask_payload):
        request = assemble_request(settings, source=source_payload, mask=mask_payload)

        assert request.roles[:2] == (ImageRole.SOURCE, ImageRole.MASK)
        assert request.text.startswith("Edit the first image based on the second mask image")


class TestImageConfig:
    """Tests for the size/ratio block."""

    def test_config_from_settings(self):
        settings = GenerationSettings(aspect_ratio=AspectRatio.WIDE, image_size=ImageSize.SIZE_4K)

        request = assemble_request(settings)

        assert request.config == ImageConfig(AspectRatio.WIDE, ImageSize.SIZE_4K)
        assert request.config.to_dict() == {"aspect_ratio": "16:9", "image_size": "4K"}

    def test_default_config(self):
        request = assemble_request(GenerationSettings())

        assert request.config.to_dict() == {"aspect_ratio": "1:1", "image_size": "1K"}

    def test_image_part_exposes_payload(self, source_payload):
        part = ImagePart(ImageRole.SOURCE, source_payload)

        assert part.mime_type == "image/png"
        assert part.data == source_payload.data
