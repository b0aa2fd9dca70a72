"""Tests for loading prospect files."""

import json

import pytest

from leadscore.importer import (
    RecordLoadError,
    dedup_key,
    dedup_prospects,
    load_prospects,
    read_records,
)
from leadscore.models import Prospect


CSV_TEXT = """company_name,business_type,city,google_rating,review_count,place_id
Acme Roofing,Roofing,Burnsville,4.8,120,abc
"North Star Plumbing, Inc.",Plumbing,Eagan,4.2,35,
Acme Roofing Co,Roofing,Burnsville,4.9,130,abc
,Electrical,Minneapolis,4.0,10,
north star plumbing inc.,Plumbing,Eagan,bad,40,
"""


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "prospects.csv"
    path.write_text(CSV_TEXT)
    return path


class TestReadRecords:
    """Test raw record readers."""

    def test_csv_rows(self, csv_file):
        """CSV rows should come back as dictionaries."""
        rows = read_records(str(csv_file))
        assert len(rows) == 5
        assert rows[1]["company_name"] == "North Star Plumbing, Inc."

    def test_json_array(self, tmp_path):
        """A JSON array of objects should be read directly."""
        path = tmp_path / "prospects.json"
        path.write_text(json.dumps([{"companyName": "A"}, {"companyName": "B"}]))
        assert [r["companyName"] for r in read_records(str(path))] == ["A", "B"]

    def test_json_wrapper(self, tmp_path):
        """An export wrapper with a prospects key should be unwrapped."""
        path = tmp_path / "export.json"
        path.write_text(json.dumps({"exported_at": "now", "prospects": [{"name": "A"}]}))
        assert read_records(str(path)) == [{"name": "A"}]

    def test_jsonl_skips_blank_and_non_objects(self, tmp_path):
        """JSON lines should ignore blank lines and non-object values."""
        path = tmp_path / "prospects.jsonl"
        path.write_text('{"name": "A"}\n\n[1, 2]\n{"name": "B"}\n')
        assert read_records(str(path)) == [{"name": "A"}, {"name": "B"}]

    def test_format_override(self, tmp_path):
        """An explicit format should win over the file extension."""
        path = tmp_path / "prospects.txt"
        path.write_text('[{"name": "A"}]')
        assert read_records(str(path), input_format="json") == [{"name": "A"}]

    def test_unsupported_extension(self, tmp_path):
        """Unknown extensions should raise RecordLoadError."""
        path = tmp_path / "prospects.xlsx"
        path.write_text("")
        with pytest.raises(RecordLoadError, match="Unsupported format"):
            read_records(str(path))

    def test_malformed_json(self, tmp_path):
        """Malformed JSON should raise RecordLoadError."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(RecordLoadError, match="Cannot parse"):
            read_records(str(path))

    def test_missing_file(self, tmp_path):
        """A missing file should raise RecordLoadError."""
        with pytest.raises(RecordLoadError, match="Cannot read"):
            read_records(str(tmp_path / "nope.csv"))


class TestDedup:
    """Test duplicate collapsing."""

    def test_key_prefers_external_id(self):
        """External ID should be the identity when present."""
        prospect = Prospect(company_name="Acme", city="Eagan", external_id="x1")
        assert dedup_key(prospect) == ("external_id", "x1")

    def test_key_name_and_city(self):
        """Name and city should be compared case-insensitively."""
        a = Prospect(company_name="Acme ", city="EAGAN")
        b = Prospect(company_name="acme", city="eagan")
        assert dedup_key(a) == dedup_key(b)

    def test_key_requires_name(self):
        """Records without a name or ID have no identity."""
        assert dedup_key(Prospect(city="Eagan")) is None

    def test_later_rows_replace_earlier(self):
        """The last duplicate should win, in the first one's position."""
        first = Prospect(company_name="Acme", city="Eagan", google_rating=4.0)
        other = Prospect(company_name="Other", city="Eagan")
        last = Prospect(company_name="ACME", city="eagan", google_rating=5.0)

        unique, duplicates = dedup_prospects([first, other, last])
        assert unique == [last, other]
        assert duplicates == 1


class TestLoadProspects:
    """Test the full load pipeline."""

    def test_csv_load_counts(self, csv_file):
        """Nameless rows are skipped and duplicates collapsed."""
        result = load_prospects(str(csv_file))
        assert result.total_rows == 5
        assert result.skipped == 1
        assert result.duplicates == 1
        assert [p.company_name for p in result.prospects] == [
            "Acme Roofing Co",
            "North Star Plumbing, Inc.",
            "north star plumbing inc.",
        ]

    def test_bad_values_do_not_reject_rows(self, csv_file):
        """A bad rating should become None, not drop the row."""
        result = load_prospects(str(csv_file))
        assert result.prospects[2].google_rating is None
        assert result.prospects[2].review_count == 40

    def test_without_dedup(self, csv_file):
        """Disabling dedup should keep every named row."""
        result = load_prospects(str(csv_file), dedup=False)
        assert len(result.prospects) == 4
        assert result.duplicates == 0
