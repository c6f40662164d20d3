"""
Tests for the cli module.
"""
import sys
import tempfile
import shutil
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from move_photos.cli import build_config, create_parser, main, run_cli, validate_args
from move_photos.interaction_manager import scripted_input


PHOTO = "IMG_2012-08-06_001.jpg"


def make_dirs(base_dir: Path):
    source = base_dir / "source"
    dest = base_dir / "dest"
    source.mkdir()
    dest.mkdir()
    (source / PHOTO).write_bytes(b"fake image 1")
    (source / "random.txt").write_text("no date here")
    return source, dest


def test_parser_defaults():
    """Test argument parsing."""
    print("\nTesting create_parser...")
    parser = create_parser()
    args = parser.parse_args(["src", "dst"])
    assert args.source == Path("src") and args.destination == Path("dst")
    assert args.strategy == ["path"]
    assert not args.dry_run and not args.yes and not args.deferred
    assert args.transfer is None

    args = parser.parse_args(["src", "dst", "--strategy", "exif", "path", "--transfer", "copy",
                              "--dry-run", "--yes", "--resolve-conflicts"])
    assert args.strategy == ["exif", "path"]
    assert args.transfer == "copy"
    assert args.dry_run and args.yes and args.resolve_conflicts
    print("  ✓ options parsed")


def test_parser_rejects_bad_input():
    """Unknown strategies and conflicting flags are usage errors."""
    parser = create_parser()
    for argv in (["src", "dst", "--strategy", "astrology"],
                 ["src", "dst", "--yes", "--deferred"],
                 ["src", "dst", "--verbose", "--quiet"],
                 ["src"]):
        try:
            parser.parse_args(argv)
            assert False, f"{argv} should be rejected"
        except SystemExit as e:
            assert e.code == 2


def test_validate_args():
    """Missing, identical or nested source directories are rejected."""
    temp_dir = Path(tempfile.mkdtemp())
    try:
        source, dest = make_dirs(temp_dir)
        parser = create_parser()
        assert validate_args(parser.parse_args([str(source), str(dest)]))
        assert not validate_args(parser.parse_args([str(temp_dir / "nope"), str(dest)]))
        assert not validate_args(parser.parse_args([str(source), str(temp_dir / "nope")]))
        assert not validate_args(parser.parse_args([str(source), str(source / PHOTO)]))
        assert not validate_args(parser.parse_args([str(source), str(source)]))

        # Source nested in the destination tree
        photos = temp_dir / "Photos"
        (photos / "2012" / "2012_08_06").mkdir(parents=True)
        assert not validate_args(parser.parse_args([str(photos / "2012"), str(photos)]))
        assert not validate_args(parser.parse_args([str(photos / "2012" / "2012_08_06"), str(photos)]))
        # The other way round is allowed; the destination is skipped while scanning
        assert validate_args(parser.parse_args([str(photos), str(photos / "2012")]))
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


def test_main_exits_on_missing_source():
    try:
        main(["/definitely/not/here", "/also/not/here"])
        assert False, "main() should exit"
    except SystemExit as e:
        assert e.code == 1


def test_build_config_overrides():
    args = create_parser().parse_args(["src", "dst", "--transfer", "copy", "--report-format", "xlsx",
                                       "--report-dir", "/tmp/r", "--log-dir", "/tmp/l"])
    cfg = build_config(args)
    assert cfg.transfer_mode == "copy"
    assert cfg.report_format == "xlsx"
    assert cfg.report_dir == Path("/tmp/r").resolve()
    assert cfg.log_dir == Path("/tmp/l").resolve()


def test_run_cli_moves_files():
    """Full batch through the CLI with --yes."""
    print("\nTesting run_cli...")
    temp_dir = Path(tempfile.mkdtemp())
    try:
        source, dest = make_dirs(temp_dir)
        lines = []
        args = create_parser().parse_args([
            str(source), str(dest), "--yes",
            "--log-dir", str(temp_dir / "logs"), "--report-dir", str(temp_dir / "reports"),
        ])

        code = run_cli(args, input_func=scripted_input([]), output_func=lines.append)

        assert code == 0
        assert (dest / "2012" / "2012_08_06" / PHOTO).exists()
        assert (source / "random.txt").exists()
        text = "\n".join(lines)
        assert "Source files found: 2" in text
        assert "Unresolved (manual review): 1" in text
        assert "[no_date]" in text and "random.txt" in text
        assert (temp_dir / "reports" / "unresolved.csv").exists()
        print("  ✓ exit code 0, photo moved, summary printed")
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


def test_run_cli_abort_exit_code():
    """Aborting a step exits with 3."""
    temp_dir = Path(tempfile.mkdtemp())
    try:
        source, dest = make_dirs(temp_dir)
        lines = []
        args = create_parser().parse_args([
            str(source), str(dest), "--quiet",
            "--log-dir", str(temp_dir / "logs"), "--report-dir", str(temp_dir / "reports"),
        ])

        code = run_cli(args, input_func=scripted_input(["a"]), output_func=lines.append)

        assert code == 3
        assert (source / PHOTO).exists()
        assert "Aborted steps: TRANSFER" in "\n".join(lines)
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


def test_run_cli_dry_run_copy():
    """Dry run reports the plan and leaves everything in place."""
    temp_dir = Path(tempfile.mkdtemp())
    try:
        source, dest = make_dirs(temp_dir)
        lines = []
        args = create_parser().parse_args([
            str(source), str(dest), "--dry-run", "--transfer", "copy",
            "--log-dir", str(temp_dir / "logs"), "--report-dir", str(temp_dir / "reports"),
        ])

        code = run_cli(args, input_func=scripted_input([]), output_func=lines.append)

        assert code == 0
        assert (source / PHOTO).exists()
        assert not (dest / "2012").exists()
        text = "\n".join(lines)
        assert "[DRY RUN] SUMMARY" in text
        assert "Would transfer: 1" in text
        assert "[WOULD COPY]" in text
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


if __name__ == "__main__":
    print("CLI TESTS")
    print("=" * 60)

    tests = [
        ("Parser defaults", test_parser_defaults),
        ("Parser rejects bad input", test_parser_rejects_bad_input),
        ("validate_args", test_validate_args),
        ("main exits on missing source", test_main_exits_on_missing_source),
        ("Config overrides", test_build_config_overrides),
        ("run_cli moves files", test_run_cli_moves_files),
        ("Abort exit code", test_run_cli_abort_exit_code),
        ("Dry run copy", test_run_cli_dry_run_copy),
    ]

    failed = 0
    for name, test in tests:
        try:
            test()
            print(f"{name}: [PASS]")
        except AssertionError as e:
            failed += 1
            print(f"{name}: [FAIL] {e}")

    print(f"\nTotal: {len(tests) - failed} passed, {failed} failed")
    sys.exit(1 if failed else 0)
