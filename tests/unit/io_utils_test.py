from pathlib import Path

import pytest
from faker import Faker

from tubekit.io_utils import load_image, load_source, truncate


def test_load_source_reads_front_matter_title(tmp_path: Path, fake: Faker) -> None:
    body = fake.paragraph()
    path = tmp_path / "notes.md"
    path.write_text(f"---\ntitle: Budget Travel Hacks\nchannel: vlog\n---\n\n{body}\n", encoding="utf-8")

    details = load_source(path, max_chars=10_000)

    assert details.title == "Budget Travel Hacks"
    assert details.body == body
    assert details.metadata["channel"] == "vlog"
    assert details.truncated is False


def test_load_source_derives_title_from_filename(tmp_path: Path) -> None:
    path = tmp_path / "rough_cut-notes.md"
    path.write_text("Plain notes without front matter.", encoding="utf-8")

    details = load_source(path, max_chars=10_000)

    assert details.title == "Rough Cut Notes"


def test_load_source_truncates_long_bodies(tmp_path: Path) -> None:
    path = tmp_path / "long.md"
    path.write_text("word " * 100, encoding="utf-8")

    details = load_source(path, max_chars=20)

    assert details.truncated is True
    assert details.body.endswith(" …")
    assert len(details.body) <= 21


def test_load_source_missing_file_raises_os_error(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_source(tmp_path / "missing.md", max_chars=100)


def test_truncate_keeps_short_text() -> None:
    assert truncate("short", 10) == ("short", False)


def test_load_image_infers_media_type(tmp_path: Path) -> None:
    path = tmp_path / "reference.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake")

    image = load_image(path)

    assert image.media_type == "image/png"
    assert image.data.startswith(b"\x89PNG")


def test_load_image_rejects_unsupported_type(tmp_path: Path) -> None:
    path = tmp_path / "reference.txt"
    path.write_text("not an image", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported image type"):
        load_image(path)


def test_load_image_rejects_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.jpg"
    path.write_bytes(b"")

    with pytest.raises(ValueError, match="empty"):
        load_image(path)
