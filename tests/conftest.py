import pytest


LUNG_CANCER = (
    'USER|MMI|5.18|Carcinoma of lung|C0684249|[neop]|'
    '["LUNG CANCER"-tx-1-"lung cancer"-noun-0]|TX|0/11|'
)

ISOPODA = (
    '3124119710|MMI|637.30|Isopoda|C0598806|[euka]|'
    '["Isopod"-ab-1-"isopod"-adj-0,"Isopoda"-ti-1-"Isopoda"-noun-0]|'
    'TI;AB|228/6;136/7|B01.050.500.131.365.400'
)

FISCAL_YEARS = "23074487|AA|FY|fiscal years|1|2|3|12|9362:2"

BROKEN_TRIGGERS = (
    'USER|MMI|5.18|Carcinoma of lung|C0684249|[neop]|'
    '["LUNG CANCER-tx-1-"lung cancer"-noun-0]|TX|0/11|'
)


@pytest.fixture
def mmi_folder(tmp_path):
    (tmp_path / "sample.txt").write_text(
        "\n".join([LUNG_CANCER, BROKEN_TRIGGERS, ISOPODA]) + "\n", encoding="utf-8"
    )
    return tmp_path
