"""Serve-date, shift and month grouping."""

from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

from lunch_app.services.grouping import (
    bucket_by_month,
    group_by_serve_date,
    group_by_shift_then_user,
    group_profiles_by_shift,
    split_active_and_past,
    summarize_items,
)
from lunch_app.services.shift_report import build_shift_report


def _item(title: str, serve_date=None, is_active: bool = True, order_deadline=None) -> SimpleNamespace:
    return SimpleNamespace(
        title=title,
        serve_date=serve_date,
        order_deadline=order_deadline,
        is_active=is_active,
        price=Decimal("10.00"),
    )


def _profile(shift_type, first_name="Ann", last_name="Lee", is_admin=False) -> SimpleNamespace:
    return SimpleNamespace(shift_type=shift_type, first_name=first_name, last_name=last_name, is_admin=is_admin)


def _order(order_id: int, user_id: int, item, quantity: int = 1, profile=None, unit_price="10.00") -> SimpleNamespace:
    return SimpleNamespace(
        id=order_id,
        user_id=user_id,
        menu_item=item,
        quantity=quantity,
        unit_price=Decimal(unit_price),
        profile=profile,
    )


def test_group_by_serve_date_sorts_dates_and_puts_unscheduled_last() -> None:
    items = [
        _item("Wrap"),
        _item("Soup", date(2025, 10, 7)),
        _item("Curry", date(2025, 10, 5)),
        _item("Bagel", date(2025, 10, 7)),
        _item("Salad"),
    ]

    groups = group_by_serve_date(items, sort_by_title=True)

    assert [group.date_key for group in groups] == ["2025-10-05", "2025-10-07", "unscheduled"]
    assert [item.title for item in groups[1].items] == ["Bagel", "Soup"]
    assert [item.title for item in groups[2].items] == ["Salad", "Wrap"]
    assert groups[2].serve_date is None


def test_group_by_serve_date_is_a_partition() -> None:
    items = [_item(f"Dish {i}", date(2025, 10, 1 + i % 3)) for i in range(9)] + [_item("Loose")]

    groups = group_by_serve_date(items)
    flattened = [item for group in groups for item in group.items]

    assert len(flattened) == len(items)
    assert {id(item) for item in flattened} == {id(item) for item in items}
    assert group_by_serve_date(items)[0].items == groups[0].items


def test_unscheduled_sorts_last_even_against_late_dates() -> None:
    groups = group_by_serve_date([_item("Later", date(9999, 12, 31)), _item("Loose")])

    assert [group.date_key for group in groups] == ["9999-12-31", "unscheduled"]


def test_order_groups_keep_natural_order_and_use_joined_item() -> None:
    soup = _item("Soup", date(2025, 10, 5))
    apple = _item("Apple", date(2025, 10, 5))
    orders = [_order(1, 1, soup), _order(2, 2, apple), _order(3, 3, None)]

    groups = group_by_serve_date(orders)

    assert [group.date_key for group in groups] == ["2025-10-05", "unscheduled"]
    assert [order.id for order in groups[0].items] == [1, 2]


def test_shared_deadline_is_first_present_deadline() -> None:
    deadline = datetime(2025, 10, 4, 18, 0, tzinfo=timezone.utc)
    groups = group_by_serve_date(
        [_item("A", date(2025, 10, 5)), _item("B", date(2025, 10, 5), order_deadline=deadline)],
        sort_by_title=True,
    )

    assert groups[0].shared_deadline == deadline


def test_orders_grouped_by_shift_then_user() -> None:
    serve_date = date(2025, 10, 5)
    soup = _item("Soup", serve_date)
    salad = _item("Salad", serve_date)
    other_day = _item("Pasta", date(2025, 10, 6))
    morning_a = _profile("morning", "Ann")
    morning_b = _profile("morning", "Ben")
    afternoon = _profile("afternoon", "Cy")
    night = _profile("night", "Di")
    orders = [
        _order(1, 1, soup, 2, morning_a),
        _order(2, 2, soup, 1, morning_b),
        _order(3, 3, salad, 1, afternoon),
        _order(4, 3, soup, 4, afternoon),
        _order(5, 4, salad, 3, night),
        _order(6, 4, other_day, 5, night),
    ]

    grouped = group_by_shift_then_user(orders, serve_date)

    assert list(grouped) == ["morning", "afternoon", "night"]
    assert sorted(grouped["morning"]) == [1, 2]
    assert list(grouped["afternoon"]) == [3]
    assert [order.id for order in grouped["afternoon"][3].orders] == [3, 4]
    assert [order.id for order in grouped["night"][4].orders] == [5]

    assert summarize_items(grouped["morning"]) == {"Soup": 3}
    assert summarize_items(grouped["afternoon"]) == {"Salad": 1, "Soup": 4}
    assert summarize_items(grouped["night"]) == {"Salad": 3}


def test_orders_without_shift_go_to_unknown() -> None:
    serve_date = date(2025, 10, 5)
    soup = _item("Soup", serve_date)

    grouped = group_by_shift_then_user(
        [_order(1, 1, soup, 1, None), _order(2, 2, soup, 1, _profile(None))],
        "2025-10-05",
    )

    assert list(grouped) == ["morning", "afternoon", "night", "unknown"]
    assert sorted(grouped["unknown"]) == [1, 2]


def test_empty_shift_report_keeps_all_shifts() -> None:
    grouped = group_by_shift_then_user([], date(2025, 10, 5))

    assert grouped == {"morning": {}, "afternoon": {}, "night": {}}


def test_summary_names_missing_items() -> None:
    grouped = {7: SimpleNamespace(orders=[SimpleNamespace(menu_item=None, quantity=2)])}

    assert summarize_items(grouped) == {"Unknown Item": 2}


def test_shift_report_totals() -> None:
    serve_date = date(2025, 10, 5)
    soup = _item("Soup", serve_date)
    orders = [
        _order(1, 1, soup, 3, _profile("morning"), "12.50"),
        _order(2, 2, soup, 1, _profile("night"), "12.50"),
    ]

    report = build_shift_report(orders, serve_date)

    assert [section.shift for section in report.sections] == ["morning", "afternoon", "night"]
    assert report.sections[0].totals.as_strings() == {"subtotal": "37.50", "tax": "4.88", "total": "42.38"}
    assert report.sections[1].order_count == 0
    assert report.totals.subtotal == Decimal("50.00")
    assert report.totals.tax == Decimal("6.50")
    assert not report.is_empty


def test_past_orders_bucketed_by_month() -> None:
    orders = [
        _order(1, 1, _item("A", date(2025, 8, 14))),
        _order(2, 1, _item("B", date(2025, 10, 3))),
        _order(3, 1, _item("C", date(2025, 9, 2))),
        _order(4, 1, _item("D", date(2025, 10, 28))),
        _order(5, 1, _item("E", date(2025, 9, 30))),
        _order(6, 1, _item("F", date(2025, 10, 15))),
    ]

    buckets = bucket_by_month(orders)

    assert [bucket.key for bucket in buckets] == ["2025-10", "2025-09", "2025-08"]
    assert [bucket.count for bucket in buckets] == [3, 2, 1]
    assert [bucket.range for bucket in buckets] == ["Oct 3 – Oct 28", "Sep 2 – Sep 30", "Aug 14 – Aug 14"]
    assert buckets[0].label == "October 2025"
    assert [order.id for order in buckets[0].orders] == [4, 6, 2]


def test_unscheduled_month_bucket_is_last() -> None:
    buckets = bucket_by_month([_order(1, 1, _item("Loose")), _order(2, 1, _item("A", date(2024, 1, 5)))])

    assert [bucket.key for bucket in buckets] == ["2024-01", "unscheduled"]
    assert buckets[1].range == "Unscheduled"
    assert buckets[1].label == "Unscheduled"


def test_split_active_and_past() -> None:
    today = date(2025, 10, 10)
    orders = [
        _order(1, 1, _item("Future", date(2025, 10, 12))),
        _order(2, 1, _item("Today", date(2025, 10, 10))),
        _order(3, 1, _item("Archived", date(2025, 10, 20), is_active=False)),
        _order(4, 1, _item("Old", date(2025, 9, 1))),
        _order(5, 1, _item("Loose")),
        _order(6, 1, None),
    ]

    active, past = split_active_and_past(orders, today)

    assert [order.id for order in active] == [2, 1]
    assert [order.id for order in past] == [3, 4, 5]


def test_profiles_grouped_by_shift_with_admins_apart() -> None:
    profiles = [
        _profile("night", "Zed", "Adams"),
        _profile("morning", "amy", "brown"),
        _profile("morning", "Al", "Brown"),
        _profile(None, "No", "Shift"),
        _profile(None, "Boss", "Admin", is_admin=True),
    ]

    directory = group_profiles_by_shift(profiles)

    assert [p.first_name for p in directory.by_shift["morning"]] == ["Al", "amy"]
    assert [p.first_name for p in directory.by_shift["night"]] == ["Zed"]
    assert [p.first_name for p in directory.by_shift["unassigned"]] == ["No"]
    assert directory.by_shift["afternoon"] == []
    assert [p.first_name for p in directory.admins] == ["Boss"]
