from tagmark.services.file_io import FileIOService


def test_read_utf8(tmp_path):
    path = tmp_path / "a.c"
    path.write_bytes("// TODO café\n".encode("utf-8"))

    result = FileIOService().read_source(path)

    assert result.success
    assert result.content == "// TODO café\n"
    assert result.encoding == "utf-8"


def test_read_strips_bom(tmp_path):
    path = tmp_path / "a.py"
    path.write_bytes(b"\xef\xbb\xbf# TODO x\n")

    result = FileIOService().read_source(path)

    assert result.success
    assert result.content == "# TODO x\n"
    assert result.encoding == "utf-8-sig"


def test_read_utf16_with_bom(tmp_path):
    path = tmp_path / "a.sql"
    path.write_bytes("-- TODO x\n".encode("utf-16"))

    result = FileIOService().read_source(path)

    assert result.success
    assert result.content == "-- TODO x\n"


def test_binary_is_rejected(tmp_path):
    path = tmp_path / "blob.bin"
    path.write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00")

    result = FileIOService().read_source(path)

    assert not result.success
    assert result.is_binary


def test_missing_file(tmp_path):
    result = FileIOService().read_source(tmp_path / "missing.c")

    assert not result.success
    assert "not found" in result.error


def test_directory_is_not_a_file(tmp_path):
    assert not FileIOService().read_source(tmp_path).success


def test_size_limit(tmp_path):
    path = tmp_path / "big.txt"
    path.write_text("x" * 100, encoding="utf-8")

    result = FileIOService().read_source(path, max_text_size=10)

    assert not result.success
    assert "too large" in result.error
