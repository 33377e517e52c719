import io

import pytest

from app import app as flask_app
from huffman import compress


@pytest.fixture
def client(tmp_path):
    flask_app.config.update(TESTING=True, UPLOAD_DIR=str(tmp_path))
    with flask_app.test_client() as client:
        yield client


def upload(client, url, data, filename):
    return client.post(
        url,
        data={"file": (io.BytesIO(data), filename)},
        content_type="multipart/form-data",
    )


def test_home_lists_endpoints(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.get_json()["endpoints"]["compress_file"] == "/compress_file"


def test_compress_then_decompress_upload(client, tmp_path):
    data = b"plain text file contents\n" * 100
    resp = upload(client, "/compress_file", data, "report.txt")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["compressed_filename"] == "report.txt.huff"
    assert body["original_size"] == len(data)
    assert body["saved"] == body["original_size"] - body["compressed_size"]

    packed = client.get(body["download_url"])
    assert packed.status_code == 200
    assert packed.data == (tmp_path / "report.txt.huff").read_bytes()

    # upload under a new name so the restored file does not overwrite the original
    resp = upload(client, "/decompress_file", packed.data, "copy.txt.huff")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["decompressed_file"] == "copy.txt"
    assert body["decompressed_size"] == len(data)
    assert client.get(body["download_url"]).data == data


def test_compress_without_file(client):
    resp = client.post("/compress_file", data={}, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "No file uploaded"


def test_compress_empty_upload(client):
    resp = upload(client, "/compress_file", b"", "empty.txt")
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_decompress_rejects_wrong_extension(client):
    resp = upload(client, "/decompress_file", b"abc", "report.txt")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Invalid file type"


def test_decompress_corrupt_upload(client):
    resp = upload(client, "/decompress_file", b"\x09", "broken.huff")
    assert resp.status_code == 400


def test_download_missing(client):
    assert client.get("/download/missing.bin").status_code == 404


def test_raw_api_round_trip(client):
    data = bytes(range(256)) * 2
    packed = client.post("/api/compress", data=data)
    assert packed.status_code == 200
    assert packed.mimetype == "application/octet-stream"
    assert packed.data == compress(data)

    restored = client.post("/api/decompress", data=packed.data)
    assert restored.status_code == 200
    assert restored.data == data


def test_raw_api_errors(client):
    assert client.post("/api/compress", data=b"").status_code == 400
    assert client.post("/api/decompress", data=b"\x01").status_code == 400
