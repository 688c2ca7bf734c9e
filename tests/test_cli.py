import re

import pytest

from conftest import broken_layer, build_smp, sample_layer
from genie_assets.cli import main
from genie_assets.parsers.color_palette import ColorPalette
from genie_assets.parsers.dds_file import DdsFile, dxgi_to_resource_format


@pytest.fixture
def run(tmp_path, capsys):
    """Run the CLI with an isolated config and return (exit code, stdout)."""
    config = str(tmp_path / 'config.json')

    def _run(*args):
        code = main(['--config', config, '--no-color', *args])
        return code, capsys.readouterr().out

    return _run


def test_no_command(run):
    code, out = run()
    assert code == 1
    assert "usage" in out.lower()


def test_group_without_subcommand(run):
    code, out = run('smp')
    assert code == 1
    assert "info" in out


def test_smp_info(run, tmp_path, smp_bytes):
    path = tmp_path / 'unit.smp'
    path.write_bytes(smp_bytes)
    code, out = run('smp', 'info', str(path))
    assert code == 0
    assert re.search(r"Frames:\s+2\b", out)
    assert "[   0:1]" in out


def test_smp_info_reports_broken_frames(run, tmp_path):
    path = tmp_path / 'broken.smp'
    path.write_bytes(build_smp([[sample_layer()], [broken_layer()]]))
    code, out = run('smp', 'info', str(path))
    assert code == 1
    assert "frame 1 layer 0" in out


def test_smp_info_fail_fast(run, tmp_path):
    path = tmp_path / 'broken.smp'
    path.write_bytes(build_smp([[broken_layer()]]))
    code, out = run('smp', 'info', str(path), '--fail-fast')
    assert code == 1
    assert "out of bounds" in out


def test_smp_info_wrong_version(run, tmp_path, smp_bytes):
    path = tmp_path / 'unit.smp'
    path.write_bytes(smp_bytes)
    code, out = run('smp', 'info', str(path), '--version', 'aok')
    assert code == 1
    assert "Unsupported game version" in out


def test_smp_export(run, tmp_path, smp_bytes):
    path = tmp_path / 'unit.smp'
    path.write_bytes(smp_bytes)
    out_dir = tmp_path / 'png'
    code, out = run('smp', 'export', str(path), str(out_dir))
    assert code == 0
    assert "Wrote 6 images" in out
    assert (out_dir / 'unit_0000_0_index.png').is_file()
    assert (out_dir / 'unit_0001_0_player.png').is_file()


def test_missing_file(run, tmp_path):
    code, out = run('smp', 'info', str(tmp_path / 'nope.smp'))
    assert code == 1
    assert "nope.smp" in out


def test_not_an_smp_file(run, tmp_path):
    path = tmp_path / 'fake.smp'
    path.write_bytes(b'\x00' * 80)
    code, out = run('smp', 'info', str(path))
    assert code == 1
    assert "Invalid signature" in out


def test_palette_show(run, tmp_path):
    path = tmp_path / 'test.pal'
    ColorPalette.create_grayscale(16).save(str(path))
    code, out = run('palette', 'show', str(path), '--count', '2')
    assert code == 0
    assert "16 colors" in out
    assert "  1: R= 17 G= 17 B= 17" in out
    assert "  2:" not in out


def test_dds_info(run, tmp_path):
    dds = DdsFile(4, 4, dxgi_to_resource_format(71))
    dds.subdata = [bytes(8)]
    path = tmp_path / 'tex.dds'
    dds.save(str(path))
    code, out = run('dds', 'info', str(path))
    assert code == 0
    assert "4 x 4 x 1" in out
    assert "BC1" in out
    assert "8 bytes per 4x4 block" in out
