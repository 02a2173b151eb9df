import pytest

from FCPE.FPM.profiles import PROFILES
from FCPE.FIM import inject_chime
from FCPE.FIM.inject_chime import main
from FCPE.SVM import verify
from FCPE.SVM.verify import VerifyResult, verify_patched_image


@pytest.fixture
def registered(monkeypatch, raw_firmware):
    firmware, profile = raw_firmware
    monkeypatch.setitem(PROFILES, profile.key, profile)
    return firmware, profile


def _write_inputs(tmp_path, firmware, sound):
    fw = tmp_path / "updater.bin"
    snd = tmp_path / "chime.raw"
    fw.write_bytes(firmware)
    snd.write_bytes(sound)
    return str(fw), str(snd), str(tmp_path / "patched.bin")


def test_detects_profile_and_writes_verified_image(tmp_path, registered, tone, capsys):
    firmware, profile = registered
    fw, snd, out = _write_inputs(tmp_path, firmware, tone)

    assert main([fw, snd, out]) == 0

    patched = open(out, "rb").read()
    assert verify_patched_image(patched, profile).ok
    report = capsys.readouterr().out
    assert "synthetic-raw" in report
    assert "VERDICT: PASS" in report


def test_exports_aifc(tmp_path, registered, tone):
    firmware, _ = registered
    fw, snd, out = _write_inputs(tmp_path, firmware, tone)
    aifc = tmp_path / "chime.aifc"

    assert main([fw, snd, out, "--export-aifc", str(aifc)]) == 0
    data = aifc.read_bytes()
    assert data[:4] == b"FORM" and data[8:12] == b"AIFC"


def test_unknown_firmware_fails(tmp_path, tone, capsys):
    fw, snd, out = _write_inputs(tmp_path, b"\x00" * 1024, tone)
    assert main([fw, snd, out]) == 1
    assert "[!!]" in capsys.readouterr().err
    assert not (tmp_path / "patched.bin").exists()


def test_sound_too_long_fails(tmp_path, registered, capsys):
    firmware, profile = registered
    fw, snd, out = _write_inputs(tmp_path, firmware, bytes(profile.sound_max_size + 2))
    assert main([fw, snd, out]) == 1
    assert "too long" in capsys.readouterr().err


def test_repatch_with_skip_hash_check(tmp_path, registered, tone):
    firmware, profile = registered
    fw, snd, out = _write_inputs(tmp_path, firmware, tone)
    assert main([fw, snd, out]) == 0

    again = str(tmp_path / "again.bin")
    assert main([out, snd, again]) == 1
    assert main([out, snd, again, "--profile", profile.key, "--skip-hash-check"]) == 0


def test_skip_hash_check_needs_profile():
    with pytest.raises(SystemExit) as exc:
        main(["a", "b", "c", "--skip-hash-check"])
    assert exc.value.code == 2


def test_missing_firmware(tmp_path, tone, capsys):
    snd = tmp_path / "chime.raw"
    snd.write_bytes(tone)
    assert main([str(tmp_path / "missing.bin"), str(snd), str(tmp_path / "o.bin")]) == 1
    assert "Unable to read" in capsys.readouterr().err


def test_failed_verification_writes_nothing(tmp_path, registered, tone, monkeypatch, capsys):
    firmware, _ = registered
    fw, snd, out = _write_inputs(tmp_path, firmware, tone)
    aifc = tmp_path / "chime.aifc"
    monkeypatch.setattr(
        inject_chime, "verify_patched_image",
        lambda *args, **kwargs: VerifyResult(1, 2, 3, 3),
    )

    assert main([fw, snd, out, "--export-aifc", str(aifc)]) == 1
    assert not (tmp_path / "patched.bin").exists()
    assert not aifc.exists()
    assert "VERDICT: FAIL" in capsys.readouterr().out


def test_verify_cli_reports_errors_on_stderr(tmp_path, registered, capsys):
    _, profile = registered
    with pytest.raises(SystemExit) as exc:
        verify.main([str(tmp_path / "missing.bin"), "--profile", profile.key])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert "[!!]" in captured.err
    assert "[!!]" not in captured.out


def test_verify_cli_passes_patched_image(tmp_path, registered, tone, capsys):
    firmware, profile = registered
    fw, snd, out = _write_inputs(tmp_path, firmware, tone)
    assert main([fw, snd, out]) == 0
    capsys.readouterr()

    with pytest.raises(SystemExit) as exc:
        verify.main([out, "--profile", profile.key])
    assert exc.value.code == 0
    assert "[FAIL]" not in capsys.readouterr().out
