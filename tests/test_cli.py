"""Tests for the command-line entry point."""

import json

import numpy as np
import pytest

import main
from utils.image_io import load_image


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('KERNELCONV_WORKERS', 'KERNELCONV_BAND_ROWS', 'KERNELCONV_LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)


def test_list_presets(capsys):
    """--list-presets prints every preset name."""
    assert main.main(['--list-presets']) == main.EXIT_OK
    out = capsys.readouterr().out
    assert 'box_blur' in out
    assert 'sharpen' in out


def test_synthetic_image(tmp_path, capsys):
    """Synthetic input is filtered and saved as PNG."""
    output = tmp_path / 'out.png'
    code = main.main(['--synthetic', 'gradient', '--preset', 'box_blur', '--workers', '2', '-o', str(output)])
    assert code == main.EXIT_OK
    assert load_image(str(output)).shape == (256, 256, 4)
    assert 'PSNR vs original' in capsys.readouterr().out


def test_image_file_with_explicit_kernel(tmp_path):
    """An image path with --kernel and --multiplier."""
    from utils.image_io import save_image

    src = tmp_path / 'in.png'
    save_image(np.full((6, 5, 4), 90, dtype=np.uint8), str(src))
    output = tmp_path / 'out.png'
    code = main.main([str(src), '--kernel', '0', '0', '0', '0', '1', '0', '0', '0', '0',
                      '--multiplier', '2', '-o', str(output)])
    assert code == main.EXIT_OK
    filtered = load_image(str(output))
    assert np.all(filtered[:, :, :3] == 180)
    assert np.all(filtered[:, :, 3] == 90)


def test_request_round_trip(tmp_path):
    """--request reads a wire request and writes the wire response."""
    request = {
        'kernel': [0, 0, 0, 0, 1, 0, 0, 0, 0],
        'width': 2,
        'height': 1,
        'image': [1, 2, 3, 4, 5, 6, 7, 8],
    }
    req_path = tmp_path / 'req.json'
    resp_path = tmp_path / 'resp.json'
    req_path.write_text(json.dumps(request), encoding='utf-8')

    assert main.main(['--request', str(req_path), '-o', str(resp_path)]) == main.EXIT_OK
    response = json.loads(resp_path.read_text(encoding='utf-8'))
    assert response == {'width': 2, 'height': 1, 'data': [1, 2, 3, 4, 5, 6, 7, 8]}


def test_invalid_request_exit_code(tmp_path):
    """InvalidInput maps to exit code 2."""
    req_path = tmp_path / 'req.json'
    req_path.write_text(json.dumps({'kernel': [1] * 9, 'width': 2, 'height': 2, 'image': [0] * 3}),
                        encoding='utf-8')
    assert main.main(['--request', str(req_path), '-o', str(tmp_path / 'r.json')]) == main.EXIT_INVALID


def test_unknown_preset_exit_code():
    """Unknown preset is invalid input."""
    assert main.main(['--synthetic', '--preset', 'nope']) == main.EXIT_INVALID


def test_missing_file_exit_code(tmp_path):
    """Unreadable image path is a failure, not a crash."""
    assert main.main([str(tmp_path / 'missing.png')]) == main.EXIT_FAILURE


def test_no_source_is_usage_error():
    """No image, --synthetic or --request exits through argparse."""
    with pytest.raises(SystemExit) as exc_info:
        main.main([])
    assert exc_info.value.code == 2
