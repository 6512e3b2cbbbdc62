import pytest
from pydantic import ValidationError

from bookmark_manager.routers.bookmarks import default_favicon_url
from bookmark_manager.schemas import BookmarkCreate, BookmarkUpdate, BookmarkWithFolder, Folder


def test_bookmark_create_accepts_camel_and_snake_case():
    camel = BookmarkCreate.model_validate({"title": "t", "url": "https://a.example", "folderId": 3})
    snake = BookmarkCreate.model_validate({"title": "t", "url": "https://a.example", "folder_id": 3})

    assert camel.folder_id == snake.folder_id == 3


def test_bookmark_create_strips_title_and_url():
    data = BookmarkCreate(title="  Docs ", url="  https://docs.example/  ")

    assert data.title == "Docs"
    assert data.url == "https://docs.example/"


@pytest.mark.parametrize("url", ["http://a.example", "HTTPS://A.EXAMPLE/path", "http://127.0.0.1:8080/x"])
def test_bookmark_create_accepts_http_urls(url):
    assert BookmarkCreate(title="t", url=url).url == url


@pytest.mark.parametrize("url", ["mailto:me@example.com", "not-a-url", "", "http://:80/", 42])
def test_bookmark_create_rejects_other_urls(url):
    with pytest.raises(ValidationError) as excinfo:
        BookmarkCreate(title="t", url=url)

    assert excinfo.value.errors()[0]["loc"] == ("url",)


def test_bookmark_update_tracks_only_sent_fields():
    update = BookmarkUpdate.model_validate({"title": "New"})

    assert update.model_dump(exclude_unset=True) == {"title": "New"}


def test_bookmark_update_rejects_null_title_and_url():
    with pytest.raises(ValidationError):
        BookmarkUpdate.model_validate({"title": None})
    with pytest.raises(ValidationError):
        BookmarkUpdate.model_validate({"url": None})

    assert BookmarkUpdate.model_validate({"folderId": None}).model_dump(exclude_unset=True) == {
        "folder_id": None
    }


def test_output_models_serialize_camel_case():
    folder = Folder(id=1, name="Work", bookmark_count=2)
    bookmark = BookmarkWithFolder(id=1, title="t", url="https://a.example", folder_id=1, folder_name="Work")

    assert folder.model_dump(by_alias=True) == {"id": 1, "name": "Work", "bookmarkCount": 2}
    assert bookmark.model_dump(by_alias=True)["folderName"] == "Work"


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://example.com/a/b?c=d", "https://example.com/favicon.ico"),
        ("http://Example.COM:8080/", "http://example.com:8080/favicon.ico"),
        ("https://user:pw@host.example/x", "https://host.example/favicon.ico"),
        ("http://[::1]:3000/", "http://[::1]:3000/favicon.ico"),
        ("not a url", None),
    ],
)
def test_default_favicon_url(url, expected):
    assert default_favicon_url(url) == expected


def test_url_is_stored_as_sent():
    # no trailing slash or lowercasing added by URL normalisation
    assert BookmarkCreate(title="t", url="https://Example.com").url == "https://Example.com"


@pytest.mark.parametrize("folder_id", [0, -5, 2**63])
def test_folder_id_must_fit_a_positive_64_bit_id(folder_id):
    with pytest.raises(ValidationError):
        BookmarkCreate(title="t", url="https://a.example", folder_id=folder_id)
    with pytest.raises(ValidationError):
        BookmarkUpdate(folder_id=folder_id)

    assert BookmarkCreate(title="t", url="https://a.example", folder_id=2**63 - 1).folder_id == 2**63 - 1
