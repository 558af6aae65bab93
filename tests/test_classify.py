import pytest

from mmi_parser.classify import FIELD_COUNTS, RecordShape, classify_line, kind_tag

from conftest import FISCAL_YEARS, ISOPODA, LUNG_CANCER


def test_classify_known_shapes():
    assert classify_line(LUNG_CANCER) is RecordShape.PRIMARY
    assert classify_line(ISOPODA) is RecordShape.PRIMARY
    assert classify_line(FISCAL_YEARS) is RecordShape.ALTERNATE
    assert classify_line("1|UA|FY|fiscal years|1|2|3|12|9362:2") is RecordShape.ALTERNATE


@pytest.mark.parametrize("line", [
    "",
    "no delimiter at all",
    "asda|fake|other stuff|",
    "24119710|mmi|637.30",
    "24119710||MMI",
])
def test_unrecognized_lines_never_raise(line):
    assert classify_line(line) is RecordShape.UNRECOGNIZED


def test_classify_only_reads_the_tag():
    # wrong field count is the decoder's problem, not the classifier's
    assert classify_line("x|MMI") is RecordShape.PRIMARY
    assert classify_line("x|AA|") is RecordShape.ALTERNATE


def test_kind_tag():
    assert kind_tag("a|MMI|b") == "MMI"
    assert kind_tag("a|AA") == "AA"
    assert kind_tag("a|") == ""
    assert kind_tag("abc") is None


def test_field_counts():
    assert FIELD_COUNTS[RecordShape.PRIMARY] == 10
    assert FIELD_COUNTS[RecordShape.ALTERNATE] == 9
