import pytest

from decomm.options import GetOptLong, LongOption

LONGOPTS = [
    LongOption("config", True, "c"),
    LongOption("bconfig", True, "b"),
    LongOption("version", False, "v"),
    LongOption("versiononly", False, "o"),
    LongOption("help", False, "h"),
]


def parse(*args, optstring="c:b:voh"):
    return list(GetOptLong(["prog", *args], optstring, LONGOPTS))


def test_short_options_with_arguments():
    assert parse("-c", "x.json", "-b", "y", "-v") == [
        ("c", "x.json"),
        ("b", "y"),
        ("v", None),
    ]


def test_attached_short_argument():
    assert parse("-cfile.json") == [("c", "file.json")]


def test_grouped_short_flags():
    assert parse("-vo") == [("v", None), ("o", None)]


@pytest.mark.parametrize("args", [("--config=a.json",), ("--config", "a.json")])
def test_long_option_argument(args):
    assert parse(*args) == [("c", "a.json")]


def test_long_index_recorded():
    parser = GetOptLong(["prog", "--help"], "c:b:voh", LONGOPTS)
    assert parser.getoption() == "h"
    assert parser.longindex == 4


def test_double_dash_ends_options():
    parser = GetOptLong(["prog", "-v", "--", "-h"], "c:b:voh", LONGOPTS)
    assert list(parser) == [("v", None)]
    assert parser.optind == 3


def test_non_option_ends_options():
    parser = GetOptLong(["prog", "file", "-v"], "c:b:voh", LONGOPTS)
    assert list(parser) == []
    assert parser.optind == 1


def test_unknown_options():
    assert parse("-z")[0][0] == GetOptLong.BADCH
    assert parse("--unknown")[0][0] == GetOptLong.BADCH


def test_missing_argument():
    assert parse("-c")[0][0] == GetOptLong.BADCH
    assert parse("-c", optstring=":c:")[0][0] == GetOptLong.BADARG
    assert parse("--config")[0][0] == GetOptLong.BADCH


def test_flag_callback():
    seen = []
    options = [LongOption("verbose", False, "x", flag=seen.append)]
    parser = GetOptLong(["prog", "--verbose"], "", options)
    assert parser.getoption() == ""
    assert seen == ["x"]
    assert parser.getoption() is None


def test_error_message_printed_when_enabled(capsys):
    parser = GetOptLong(["prog", "-z"], "v", [], opterr=True)
    assert parser.getoption() == "?"
    assert "illegal option -- z" in capsys.readouterr().out