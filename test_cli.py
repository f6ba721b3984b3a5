import base64
import hashlib
import io

import pytest
import yaml

from errors import InputTooLarge, InputUnavailable
from input_source import as_message_bytes, from_text, read_file, read_stream
from sha256_cli import main
from vectors import BUNDLED, KnownAnswer, load_vectors, run_vectors, summarize
import vectors


ABC_HEX = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_message_argument(capsys):
    assert main(["abc"]) == 0
    assert capsys.readouterr().out == ABC_HEX + "\n"


def test_empty_message_argument(capsys):
    assert main([""]) == 0
    assert capsys.readouterr().out.strip() == hashlib.sha256(b"").hexdigest()


def test_message_is_utf8_encoded(capsys):
    assert main(["héllo"]) == 0
    expected = hashlib.sha256("héllo".encode("utf-8")).hexdigest()
    assert capsys.readouterr().out.strip() == expected


def test_undecodable_argument_is_reported(capsys):
    """
    Argument bytes that are not valid UTF-8 reach Python as lone surrogates;
    the CLI reports them as an input error instead of a traceback.
    """
    assert main(["a\udcff"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Error: could not read '<argument>'")


def test_from_text_wraps_encode_error():
    with pytest.raises(InputUnavailable) as excinfo:
        from_text("a\udcff")
    assert isinstance(excinfo.value.__cause__, UnicodeEncodeError)


def test_file_argument(tmp_path, capsys):
    path = tmp_path / "book.txt"
    data = b"\x00\x01binary\xffcontent" * 50
    path.write_bytes(data)

    assert main(["-f", str(path)]) == 0
    assert capsys.readouterr().out.strip() == hashlib.sha256(data).hexdigest()


def test_missing_file(tmp_path, capsys):
    assert main(["-f", str(tmp_path / "missing.txt")]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Error: could not read" in captured.err


def test_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"abc")))
    assert main(["-f", "-"]) == 0
    assert capsys.readouterr().out.strip() == ABC_HEX


def test_base64_format(capsys):
    assert main(["--format", "base64", "abc"]) == 0
    expected = base64.b64encode(bytes.fromhex(ABC_HEX)).decode("ascii")
    assert capsys.readouterr().out.strip() == expected


def test_no_input_prints_usage(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().err


def test_message_and_file_conflict():
    with pytest.raises(SystemExit):
        main(["abc", "-f", "other.txt"])


def test_trace_output(capsys):
    assert main(["--trace", "abc"]) == 0
    out = capsys.readouterr().out
    digest_line, _, trace = out.partition("\n")
    document = yaml.safe_load(trace)

    assert digest_line == ABC_HEX
    assert document["digest_hex"] == ABC_HEX
    assert len(document["blocks"]) == 1
    assert document["blocks"][0]["block_index"] == 0
    assert len(document["blocks"][0]["h_values"]) == 64
    # h after round 0 is the initial g word
    assert document["blocks"][0]["h_values"][0] == "1f83d9ab"


def test_self_test_bundled_vectors(capsys):
    assert main(["--self-test"]) == 0
    out = capsys.readouterr().out
    assert "[FAIL]" not in out
    assert "All 6 vectors passed" in out


def test_self_test_reports_failure(tmp_path, capsys):
    path = tmp_path / "vectors.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "vectors": [
                    {"name": "abc", "message": "abc", "digest": ABC_HEX},
                    {"name": "wrong", "message": "abd", "digest": ABC_HEX},
                ]
            }
        )
    )
    assert main(["--self-test", str(path)]) == 1
    captured = capsys.readouterr()
    assert "[PASS] abc" in captured.out
    assert "[FAIL] wrong" in captured.out
    assert "1 of 2 vectors failed: wrong" in captured.err


def test_self_test_bad_vectors_file(tmp_path, capsys):
    path = tmp_path / "vectors.yaml"
    path.write_text("not_vectors: []\n")
    assert main(["--self-test", str(path)]) == 1
    assert "Error loading vectors" in capsys.readouterr().err


def test_load_bundled_vectors():
    vectors = load_vectors()
    assert [v.name for v in vectors][:2] == ["empty", "abc"]
    hello = next(v for v in vectors if v.name == "hello")
    assert hello.message == b"hello"


def test_bundled_vectors_need_no_data_file(monkeypatch, tmp_path, capsys):
    """
    The default vectors live inside the module, so --self-test works from any
    directory and never open a file.
    """

    def no_files(*args, **kwargs):
        raise OSError("file access not expected")

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(vectors, "open", no_files, raising=False)

    assert len(load_vectors()) == 6
    assert len(load_vectors(BUNDLED)) == 6
    assert main(["--self-test"]) == 0
    assert "All 6 vectors passed" in capsys.readouterr().out


@pytest.mark.parametrize(
    "entry",
    [
        {"name": "no-message", "digest": ABC_HEX},
        {"name": "both", "message": "a", "message_hex": "61", "digest": ABC_HEX},
        {"name": "short", "message": "abc", "digest": "ba78"},
        {"name": "not-hex", "message": "abc", "digest": "z" * 64},
        "just a string",
    ],
)
def test_load_vectors_rejects_malformed_entries(tmp_path, entry):
    path = tmp_path / "vectors.yaml"
    path.write_text(yaml.safe_dump({"vectors": [entry]}))
    with pytest.raises(ValueError):
        load_vectors(path)


def test_run_vectors_and_summarize():
    vectors = [
        KnownAnswer(name="abc", message=b"abc", digest=ABC_HEX),
        KnownAnswer(name="bad", message=b"", digest=ABC_HEX),
    ]
    results = run_vectors(vectors, lambda m: hashlib.sha256(m).digest())
    assert [r.passed for r in results] == [True, False]
    assert summarize(results) == "1 of 2 vectors failed: bad"
    assert summarize(results[:1]) is None


def test_read_file_directory_is_unavailable(tmp_path):
    with pytest.raises(InputUnavailable) as excinfo:
        read_file(tmp_path)
    assert excinfo.value.source == str(tmp_path)
    assert isinstance(excinfo.value.__cause__, OSError)


def test_read_stream_closed_is_unavailable():
    stream = io.BytesIO(b"abc")
    stream.close()
    with pytest.raises(InputUnavailable):
        read_stream(stream)


def test_read_stream_reads_to_eof():
    assert read_stream(io.BytesIO(b"abc" * 100)) == b"abc" * 100


def test_as_message_bytes_checks_type():
    assert as_message_bytes(bytearray(b"ab")) == b"ab"
    assert from_text("abc") == b"abc"
    with pytest.raises(TypeError):
        as_message_bytes("abc")


def test_input_too_large_message():
    error = InputTooLarge(2**64)
    assert error.length_bits == 2**64
    assert "64-bit length field" in str(error)
