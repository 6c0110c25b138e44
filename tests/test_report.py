from collection_diff.diff import compute_diff
from collection_diff.models import DiffResult, Entity
from collection_diff.report import NO_DIFFERENCES, format_header, format_report


def test_header_names_collection_and_revisions():
    header = format_header("rcuccp", 3, 7)
    assert "rcuccp" in header
    assert "**3**" in header and "**7**" in header


def test_full_report_layout(old_snapshot, new_snapshot):
    report = format_report("myslug", 1, 2, compute_diff(old_snapshot, new_snapshot))

    assert report == (
        "diff **myslug** between revision **1** and **2**\n"
        "\n**new:**\n"
        "• C (v1.0)\n"
        "\n**removed:**\n"
        "• A (v1.0)\n"
        "\n**updated:**\n"
        "• B: v2.0 → v2.1"
    )


def test_empty_sections_are_skipped():
    diff = DiffResult(removed=(Entity(id="1", name="Gone", version="1"),))
    report = format_report("s", 1, 2, diff)

    assert "**removed:**" in report
    assert "**new:**" not in report
    assert "**updated:**" not in report
    assert NO_DIFFERENCES not in report


def test_no_differences_line():
    report = format_report("s", 4, 4, DiffResult())
    lines = report.splitlines()

    assert len(lines) == 2
    assert lines[1] == NO_DIFFERENCES


def test_section_order_is_fixed():
    old = [Entity("1", "Upd", "1"), Entity("2", "Gone", "1")]
    new = [Entity("1", "Upd", "2"), Entity("3", "Fresh", "1")]
    report = format_report("s", 1, 2, compute_diff(old, new))

    assert report.index("**new:**") < report.index("**removed:**") < report.index("**updated:**")
