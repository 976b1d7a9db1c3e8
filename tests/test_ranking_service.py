from portfolio_generator.models import ProjectRecord
from portfolio_generator.services.ranking_service import rank_projects


def _records(*stars):
    return [ProjectRecord(name=f"p{index}", stars=count) for index, count in enumerate(stars)]


def test_top_three_by_stars_are_featured():
    ranked = rank_projects(_records(5, 40, 1, 12, 30, 0))

    assert [record.stars for record in ranked] == [40, 30, 12, 5, 1, 0]
    assert [record.featured for record in ranked] == [True, True, True, False, False, False]
    assert {record.name for record in ranked if record.featured} == {"p1", "p4", "p3"}


def test_fewer_than_three_records_are_all_featured():
    assert [record.featured for record in rank_projects(_records(2, 9))] == [True, True]
    assert rank_projects([]) == []


def test_equal_stars_keep_input_order():
    ranked = rank_projects(_records(3, 7, 3, 3, 7))

    assert [record.name for record in ranked] == ["p1", "p4", "p0", "p2", "p3"]


def test_stale_featured_flags_are_cleared():
    records = [ProjectRecord(name="old", stars=0, featured=True)] + _records(10, 20, 30)
    ranked = rank_projects(records)

    assert ranked[-1].name == "old"
    assert ranked[-1].featured is False


def test_input_records_are_not_mutated():
    records = _records(1, 2)
    rank_projects(records)
    assert all(record.featured is False for record in records)
