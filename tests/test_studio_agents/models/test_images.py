"""Tests for studio_agents.models.images module."""

from studio_agents.models import EncodedImagePart, GeneratedImage, ImageInput


class TestImageInput:
    """Tests for ImageInput."""

    def test_supported(self):
        assert ImageInput(data=b"x", mime_type="image/webp").is_supported
        assert not ImageInput(data=b"x", mime_type="image/gif").is_supported

    def test_identity_equality(self):
        a = ImageInput(data=b"x", mime_type="image/png")
        b = ImageInput(data=b"x", mime_type="image/png")
        assert a != b
        assert a == a

    def test_from_path_guesses_mime_type(self, tmp_path):
        path = tmp_path / "plan.JPG"
        path.write_bytes(b"\xff\xd8\xff")
        image = ImageInput.from_path(path)
        assert image.mime_type == "image/jpeg"
        assert image.filename == "plan.JPG"
        assert image.data == b"\xff\xd8\xff"

    def test_from_path_heic(self, tmp_path):
        path = tmp_path / "photo.heic"
        path.write_bytes(b"heic")
        assert ImageInput.from_path(path).mime_type == "image/heic"

    def test_repr_hides_bytes(self):
        image = ImageInput(data=b"0123456789", mime_type="image/png", filename="a.png")
        assert "size=10" in repr(image)
        assert "0123456789" not in repr(image)


class TestEncodedImagePart:
    """Tests for EncodedImagePart."""

    def test_to_wire(self):
        part = EncodedImagePart(base64_data="AAAA", mime_type="image/heif")
        assert part.to_wire() == {"inline_data": {"mime_type": "image/heif", "data": "AAAA"}}

    def test_to_data_url(self):
        part = EncodedImagePart(base64_data="AAAA", mime_type="image/png")
        assert part.to_data_url() == "data:image/png;base64,AAAA"


class TestGeneratedImage:
    """Tests for GeneratedImage."""

    def test_to_dict(self):
        image = GeneratedImage(base64_data="QkJC", mime_type="image/jpeg", request_index=2)
        data = image.to_dict()
        assert data["data_url"] == "data:image/jpeg;base64,QkJC"
        assert data["request_index"] == 2
