from _pytest.monkeypatch import MonkeyPatch

import tubekit as tubekit_init


def test_resolve_version_strips_duplicate_git_tag(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr(tubekit_init, "version", lambda _: "0.1.0")
    monkeypatch.setattr(
        tubekit_init,
        "_git_description",
        lambda: "v0.1.0-13-gcfeefb2-dirty",
    )

    assert tubekit_init._resolve_version() == "0.1.0-13-gcfeefb2-dirty"


def test_resolve_version_appends_unrelated_git_description(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr(tubekit_init, "version", lambda _: "0.2.0")
    monkeypatch.setattr(tubekit_init, "_git_description", lambda: "cfeefb2")

    assert tubekit_init._resolve_version() == "0.2.0+cfeefb2"


def test_resolve_version_without_git(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr(tubekit_init, "version", lambda _: "0.1.0")
    monkeypatch.setattr(tubekit_init, "_git_description", lambda: None)

    assert tubekit_init._resolve_version() == "0.1.0"
