"""Tests for the command line interface."""

import json

import pytest

from fml_interpreter.cli import create_parser, main

PAGE = '(# "top") (box ({(fill "1")} "left") (& "logo" "Logo")) (^ "gopher://h/1" "Home")'


@pytest.fixture
def page_file(temp_dir):
    path = temp_dir / "page.fml"
    path.write_text(PAGE, encoding="utf-8")
    return path


class TestCreateParser:
    """Test suite for the argument parser."""

    def test_layout_defaults(self):
        args = create_parser().parse_args(["layout", "page.fml"])

        assert (args.width, args.height, args.dpi) == (800.0, 600.0, 96.0)
        assert args.shaper == "reportlab"
        assert args.object == []
        assert not args.json

    def test_repeated_objects(self):
        args = create_parser().parse_args(["layout", "p.fml", "--object", "a=a.png", "--object", "b=b.png"])

        assert args.object == ["a=a.png", "b=b.png"]

    def test_invalid_shaper(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["layout", "p.fml", "--shaper", "harfbuzz"])


class TestMain:
    """Test suite for main()."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: fml" in capsys.readouterr().out

    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert "fml-interpreter v0.1.0" in capsys.readouterr().out

    def test_check(self, page_file, capsys):
        assert main(["check", str(page_file)]) == 0

        err = capsys.readouterr().err
        assert "OK:" in err
        assert "1 anchors" in err
        assert "1 binary references" in err

    def test_check_reports_diagnostics(self, temp_dir, capsys):
        path = temp_dir / "bad.fml"
        path.write_text('({ghost} "x")', encoding="utf-8")

        assert main(["check", str(path)]) == 0
        assert "unknown-style-reference" in capsys.readouterr().err

    def test_missing_file(self, temp_dir, capsys):
        assert main(["check", str(temp_dir / "nope.fml")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_syntax_error(self, temp_dir, capsys):
        path = temp_dir / "broken.fml"
        path.write_text('(box ("x")', encoding="utf-8")

        assert main(["check", str(path)]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_layout_json(self, page_file, capsys):
        assert main(["layout", str(page_file), "--json", "--shaper", "fixed", "--width", "400"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["viewport"] == [400.0, 600.0]
        assert data["anchors"] == {"top": 0.0}
        assert data["links"] == [{"url": "gopher://h/1", "text": "Home"}]
        assert len(data["warnings"]) == 1
        assert data["root"]["kind"] == "vbox"

    def test_layout_with_object(self, page_file, temp_dir, png_bytes, capsys):
        logo = temp_dir / "logo.png"
        logo.write_bytes(png_bytes(20, 10))

        code = main(["layout", str(page_file), "--json", "--shaper", "fixed", "--object", f"logo={logo}"])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["warnings"] == []
        row = data["root"]["children"][1]
        assert row["children"][1]["image"] == "logo"

    def test_layout_bad_object_argument(self, page_file, capsys):
        assert main(["layout", str(page_file), "--object", "logo"]) == 1
        assert "NAME=PATH" in capsys.readouterr().err

    def test_layout_tree_view(self, page_file, capsys):
        assert main(["layout", str(page_file), "--shaper", "fixed"]) == 0

        captured = capsys.readouterr()
        assert "vbox" in captured.out
        assert "#top -> y=0.0" in captured.out
        assert "Home -> gopher://h/1" in captured.out
        assert "unresolved-binary-reference" in captured.err

    def test_html_to_stdout(self, page_file, capsys):
        assert main(["html", str(page_file)]) == 0
        assert '<a href="gopher://h/1">Home</a>' in capsys.readouterr().out

    def test_html_to_file(self, page_file, temp_dir):
        output = temp_dir / "out.html"

        assert main(["html", str(page_file), "-o", str(output)]) == 0
        assert output.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")

    def test_format(self, page_file, capsys):
        assert main(["format", str(page_file)]) == 0

        assert capsys.readouterr().out.splitlines()[0] == '(# "top")'
