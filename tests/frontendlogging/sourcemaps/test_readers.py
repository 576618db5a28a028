import pytest

from frontendlogging.sourcemaps.readers import clean_path, read_sourcemap_from_fs


@pytest.fixture
def static_root(tmp_path):
    build = tmp_path / "public" / "build"
    build.mkdir(parents=True)
    (build / "app.js.map").write_bytes(b'{"version": 3}')
    (tmp_path / "secret.map").write_bytes(b"secret")
    return tmp_path / "public"


@pytest.mark.parametrize(
    "path,expected",
    [
        ("build/app.js.map", "/build/app.js.map"),
        ("/module.js.map", "/module.js.map"),
        ("//module.js.map", "/module.js.map"),
        ("build/./chunks/../app.js.map", "/build/app.js.map"),
        ("../../etc/passwd.map", "/etc/passwd.map"),
        ("/../../etc/passwd.map", "/etc/passwd.map"),
    ],
)
def test_clean_path(path, expected):
    assert clean_path(path) == expected


def test_read(static_root):
    assert read_sourcemap_from_fs(str(static_root), "/build/app.js.map") == b'{"version": 3}'
    assert read_sourcemap_from_fs(str(static_root), "build/app.js.map") == b'{"version": 3}'


def test_read_missing_file(static_root):
    with pytest.raises(FileNotFoundError):
        read_sourcemap_from_fs(str(static_root), "/build/vendor.js.map")


def test_read_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_sourcemap_from_fs(str(tmp_path / "nope"), "/build/app.js.map")


def test_read_cannot_escape_directory(static_root):
    with pytest.raises(FileNotFoundError):
        read_sourcemap_from_fs(str(static_root), "../secret.map")

