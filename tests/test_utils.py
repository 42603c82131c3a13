from datetime import date

import pytest

from homeledger.utils.dates import add_days, is_due_within
from homeledger.utils.files import remove_upload, safe_file_name, save_upload
from homeledger.utils.validators import age_in_years, check_adult, check_password_strength, check_postal_code


def test_password_strength():
    assert check_password_strength("Abcdefg1") == "Abcdefg1"
    with pytest.raises(ValueError, match="upper-case"):
        check_password_strength("abcdefg1")
    with pytest.raises(ValueError, match="digit"):
        check_password_strength("Abcdefgh")


def test_age_ignores_birthday():
    assert age_in_years(date(2000, 12, 31), today=date(2018, 1, 1)) == 18


def test_check_adult_bounds():
    this_year = date.today().year
    assert check_adult(date(this_year - 120, 6, 1))
    with pytest.raises(ValueError):
        check_adult(date(this_year - 121, 6, 1))
    with pytest.raises(ValueError):
        check_adult(date(this_year - 17, 6, 1))


def test_postal_code():
    assert check_postal_code("00184") == "00184"
    with pytest.raises(ValueError):
        check_postal_code("184")


def test_due_dates():
    assert add_days(date(2024, 2, 28), 2) == date(2024, 3, 1)
    today = date(2024, 5, 1)
    assert is_due_within(date(2024, 5, 1), 30, today)
    assert is_due_within(date(2024, 5, 31), 30, today)
    assert not is_due_within(date(2024, 6, 1), 30, today)
    assert not is_due_within(date(2024, 4, 30), 30, today)
    assert not is_due_within(None, 30, today)


def test_safe_file_name():
    name = safe_file_name("../../etc/my contract (v2).pdf", prefix="contract")
    assert name.startswith("contract_")
    assert name.endswith("_my_contract__v2_.pdf")
    assert "/" not in name
    assert safe_file_name(None).endswith("_document.pdf")


def test_safe_file_name_always_pdf():
    name = safe_file_name("x.p d<f")
    assert name.endswith(".pdf")
    assert " " not in name and "<" not in name
    assert safe_file_name("report.docx").endswith("_report.pdf")


def test_save_upload(tmp_path):
    path = save_upload(b"data", upload_dir=str(tmp_path / "nested"), subdir="sub", file_name="a.pdf")
    assert path == "sub/a.pdf"
    assert (tmp_path / "nested" / "sub" / "a.pdf").read_bytes() == b"data"


def test_save_upload_stays_inside_upload_dir(tmp_path):
    with pytest.raises(ValueError):
        save_upload(b"data", upload_dir=str(tmp_path), subdir="..", file_name="a.pdf")


def test_remove_upload(tmp_path, caplog):
    root = tmp_path / "uploads"
    path = save_upload(b"data", upload_dir=str(root), subdir="sub", file_name="a.pdf")
    remove_upload(path, upload_dir=str(root))
    assert not (root / path).exists()

    remove_upload(path, upload_dir=str(root))
    remove_upload(None, upload_dir=str(root))
    assert not caplog.records

    (tmp_path / "outside.pdf").write_bytes(b"keep")
    remove_upload("../outside.pdf", upload_dir=str(root))
    assert (tmp_path / "outside.pdf").read_bytes() == b"keep"
    assert any(r.levelname == "ERROR" for r in caplog.records)
