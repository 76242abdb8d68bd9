import base64
import struct

from fastapi.testclient import TestClient
from sensorchart.main import app

client = TestClient(app)

CSV = (
    "Time,RAM,CPU,GPU\n"
    "12:00:00.000,50.0,20.0,10.0\n"
    "12:00:05.500,55.0,25.0,15.0\n"
)
SEQUENTIAL = {"time": 0, "ram": 1, "cpu": 2, "gpu": 3}


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_normalize_cp1252_to_utf8():
    # Windows-1252 degree sign and euro sign
    raw = "Time,GPU Temperature [°C],Cost [€]\n".encode("cp1252")

    files = {"file": ("log.csv", raw, "text/csv")}
    r = client.post("/normalize", files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["normalized_csv"]["encoding"] == "utf-8"
    assert data["report"]["non_ascii"] is True

    out_bytes = base64.b64decode(data["normalized_csv"]["content_b64"])
    assert not out_bytes.startswith(b"\xef\xbb\xbf")
    assert out_bytes.decode("utf-8") == "Time,GPU Temperature [°C],Cost [€]\n"


def test_chart_returns_png():
    files = {"file": ("log.csv", CSV.encode("cp1252"), "text/csv")}
    r = client.post("/chart", files=files, params=SEQUENTIAL)
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/png"
    assert r.content.startswith(b"\x89PNG\r\n\x1a\n")
    assert struct.unpack(">II", r.content[16:24]) == (1200, 900)


def test_chart_rejects_non_csv():
    files = {"file": ("log.txt", CSV.encode("cp1252"), "text/plain")}
    r = client.post("/chart", files=files, params=SEQUENTIAL)
    assert r.status_code == 422


def test_chart_reports_bad_data():
    raw = b"12:00:00.000,fifty,20.0,10.0\n"
    files = {"file": ("log.csv", raw, "text/csv")}
    r = client.post("/chart", files=files, params=SEQUENTIAL)
    assert r.status_code == 422
    assert "not a number" in r.json()["detail"]
