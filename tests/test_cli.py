import numpy as np
import pytest

from stegowave.cli import main


@pytest.fixture
def cover(tmp_path, make_wav, sine):
    path = tmp_path / "cover.wav"
    path.write_bytes(make_wav(sine(20_000)))
    return path


@pytest.fixture(autouse=True)
def _no_settings_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("STEGOWAVE__DEFAULT_LSB_DEPTH", raising=False)
    monkeypatch.delenv("STEGOWAVE__MAX_OCCUPANCY", raising=False)


def test_hide_extract_clear(tmp_path, cover, capsys):
    stego = tmp_path / "stego.wav"
    assert main(["hide", "--input-file", str(cover), "--output-file", str(stego),
                 "-m", "Hello World!", "-p", "qwerty1234", "-l", "2"]) == 0
    assert "Hidden 12 bytes" in capsys.readouterr().out

    assert main(["extract", "--input-file", str(stego), "-p", "qwerty1234", "-l", "2"]) == 0
    assert capsys.readouterr().out.strip() == "Hello World!"

    cleaned = tmp_path / "clean.wav"
    assert main(["clear", "--input-file", str(stego), "--output-file", str(cleaned),
                 "-p", "qwerty1234", "-l", "2"]) == 0
    capsys.readouterr()

    assert main(["extract", "--input-file", str(cleaned), "-p", "qwerty1234", "-l", "2"]) == 1
    assert "Password is incorrect" in capsys.readouterr().err


def test_wrong_password(tmp_path, cover, capsys):
    stego = tmp_path / "stego.wav"
    main(["hide", "--input-file", str(cover), "--output-file", str(stego), "-m", "hi", "-p", "right"])
    assert main(["extract", "--input-file", str(stego), "-p", "wrong"]) == 1
    assert "Password is incorrect" in capsys.readouterr().err


def test_clear_in_place(tmp_path, cover, capsys):
    stego = tmp_path / "stego.wav"
    main(["hide", "--input-file", str(cover), "--output-file", str(stego), "-m", "hi", "-p", "pw"])
    assert main(["clear", "--input-file", str(stego), "-p", "pw"]) == 0
    assert main(["clear", "--input-file", str(stego), "-p", "pw"]) == 1
    assert "Nothing to clear" in capsys.readouterr().err


def test_message_file_and_out_file(tmp_path, cover):
    secret = tmp_path / "secret.bin"
    secret.write_bytes(bytes(range(200)))
    stego = tmp_path / "stego.wav"
    recovered = tmp_path / "recovered.bin"
    assert main(["hide", "--input-file", str(cover), "--output-file", str(stego),
                 "--message-file", str(secret), "-p", "pw", "-l", "3"]) == 0
    assert main(["extract", "--input-file", str(stego), "-p", "pw", "-l", "3",
                 "--out-file", str(recovered)]) == 0
    assert recovered.read_bytes() == bytes(range(200))


def test_password_prompt(tmp_path, cover, monkeypatch, capsys):
    monkeypatch.setattr("getpass.getpass", lambda prompt="": "prompted")
    stego = tmp_path / "stego.wav"
    assert main(["hide", "--input-file", str(cover), "--output-file", str(stego), "-m", "hey"]) == 0
    capsys.readouterr()
    assert main(["extract", "--input-file", str(stego), "-p", "prompted"]) == 0
    assert capsys.readouterr().out.strip() == "hey"


def test_snr_against(tmp_path, cover, capsys):
    stego = tmp_path / "stego.wav"
    assert main(["hide", "--input-file", str(cover), "--output-file", str(stego),
                 "-m", "hi", "-p", "pw", "--snr-against"]) == 0
    assert "SNR:" in capsys.readouterr().out


def test_too_long_message(tmp_path, make_wav, capsys):
    small = tmp_path / "small.wav"
    small.write_bytes(make_wav(np.zeros(100, dtype=np.int16)))
    assert main(["hide", "--input-file", str(small), "--output-file", str(tmp_path / "o.wav"),
                 "-m", "x" * 50, "-p", "pw"]) == 1
    assert "too short" in capsys.readouterr().err


def test_invalid_file(tmp_path, capsys):
    bogus = tmp_path / "bogus.wav"
    bogus.write_bytes(b"not a wav file at all")
    assert main(["extract", "--input-file", str(bogus), "-p", "pw"]) == 1
    assert "Invalid file" in capsys.readouterr().err


def test_invalid_depth(cover, capsys):
    assert main(["extract", "--input-file", str(cover), "-p", "pw", "-l", "17"]) == 1
    assert "lsb_depth" in capsys.readouterr().err


def test_settings_file_sets_default_depth(tmp_path, cover, capsys):
    (tmp_path / "stegowave.toml").write_text("[stego_wave_lib]\ndefault_lsb_depth = 4\n")
    stego = tmp_path / "stego.wav"
    main(["hide", "--input-file", str(cover), "--output-file", str(stego), "-m", "deep", "-p", "pw"])
    capsys.readouterr()
    assert main(["extract", "--input-file", str(stego), "-p", "pw", "-l", "4"]) == 0
    assert capsys.readouterr().out.strip() == "deep"


def test_unknown_format_is_usage_error(cover):
    with pytest.raises(SystemExit) as exc:
        main(["extract", "--input-file", str(cover), "-p", "pw", "-f", "mp3"])
    assert exc.value.code == 2


def test_malformed_settings_file(tmp_path, cover, capsys):
    (tmp_path / "stegowave.toml").write_text("[stego_wave_lib\n")
    assert main(["extract", "--input-file", str(cover), "-p", "pw"]) == 1
    assert "Invalid settings file" in capsys.readouterr().err
