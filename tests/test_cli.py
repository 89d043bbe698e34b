import pytest

from wifiqr import cli
from wifiqr.settings import settings


@pytest.fixture(autouse=True)
def output_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "output_dir", str(tmp_path))
    return tmp_path


def test_prints_payload_and_writes_default_file(output_dir, capsys):
    assert cli.main(["MyNet", "wpa", "-p", "secret"]) == 0
    assert capsys.readouterr().out.strip() == "WIFI:T:WPA;S:MyNet;P:secret;;"
    assert (output_dir / "wifi-MyNet.png").read_bytes().startswith(b"\x89PNG")


def test_identity_in_file_name(output_dir, capsys):
    rc = cli.main([
        "Corp", "wpa2-enterprise",
        "--eap", "peap", "--ph2", "ms-chap-v2",
        "-i", "alice", "-a", "anon", "-p", "pw",
    ])
    assert rc == 0
    assert capsys.readouterr().out.strip() == (
        "WIFI:T:WPA2-EAP;S:Corp;E:PEAP;PH2:MSCHAPV2;A:anon;I:alice;P:pw;;"
    )
    assert (output_dir / "wifi-Corp-alice.png").exists()


def test_kind_is_optional(output_dir, capsys):
    assert cli.main(["Guest", "--hidden"]) == 0
    assert capsys.readouterr().out.strip() == "WIFI:S:Guest;H:true;;"


def test_qoi_format_sets_extension(output_dir):
    assert cli.main(["Home", "wpa3", "-p", "pw", "--image-format", "qoi"]) == 0
    assert (output_dir / "wifi-Home.qoi").read_bytes()[:4] == b"qoif"


def test_output_path_guesses_format(tmp_path):
    out = tmp_path / "custom.jpg"
    assert cli.main(["Home", "wpa", "-p", "pw", "-o", str(out)]) == 0
    assert out.read_bytes()[:2] == b"\xff\xd8"


def test_public_key(capsys):
    assert cli.main(["Home", "wpa3", "-k", "a2V5"]) == 0
    assert capsys.readouterr().out.strip() == "WIFI:T:WPA;R:1;S:Home;K:a2V5;;"


def test_bad_public_key(capsys):
    assert cli.main(["Home", "wpa3", "-k", "not base64!"]) == 1
    assert "public key" in capsys.readouterr().err


def test_empty_ssid_fails(capsys):
    assert cli.main([""]) == 1
    assert capsys.readouterr().err.startswith("error:")


def test_oversized_payload_fails(output_dir, capsys):
    assert cli.main(["Big", "wpa", "-p", "x" * 4000]) == 1
    assert capsys.readouterr().err.startswith("error:")
    assert not (output_dir / "wifi-Big.png").exists()


def test_write_failure_exits_nonzero(tmp_path, capsys):
    out = tmp_path / "missing" / "wifi.png"
    assert cli.main(["Home", "-o", str(out)]) == 1
    assert "error:" in capsys.readouterr().err


def test_unknown_kind_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        cli.main(["Home", "wpa4"])
    assert exc.value.code == 2
