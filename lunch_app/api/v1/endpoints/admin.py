"""Admin endpoints: menu management, order reports and profiles."""

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from lunch_app.api.v1.serializers import serialize_admin_order, serialize_menu_item, serialize_totals
from lunch_app.core.security import require_admin
from lunch_app.db.session import get_db
from lunch_app.models.menu import MenuItem
from lunch_app.models.user import Profile, User
from lunch_app.schemas.menu import MenuItemPayload, MenuItemResponse
from lunch_app.schemas.order import (
    AdminDayResponse,
    ShiftReportResponse,
    ShiftSectionResponse,
    ShiftUserResponse,
)
from lunch_app.schemas.profile import AdminProfileUpdate, ProfileDirectoryResponse, ProfileResponse
from lunch_app.services.grouping import group_by_serve_date, group_profiles_by_shift
from lunch_app.services.menu_service import (
    create_menu_item,
    delete_menu_item,
    get_menu_item,
    list_admin_menu_items,
    list_serve_dates,
    update_menu_item,
)
from lunch_app.services.order_service import list_all_orders, list_orders_for_serve_date
from lunch_app.services.pdf_exports import render_shift_report_pdf, report_filename
from lunch_app.services.profile_service import get_profile, list_profiles, update_user_profile
from lunch_app.services.shift_report import ShiftReport, build_shift_report, user_totals
from lunch_app.services.totals import calculate_aggregate_totals, order_lines
from lunch_app.utils import time as time_utils

router: APIRouter = APIRouter()


def _get_item_or_404(db: Session, item_id: int) -> MenuItem:
    item: MenuItem | None = get_menu_item(db, item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found")
    return item


@router.get("/menu", response_model=list[MenuItemResponse])
def get_admin_menu(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> list[MenuItemResponse]:
    """List all menu items, active and archived."""
    return [serialize_menu_item(item) for item in list_admin_menu_items(db)]


@router.post("/menu", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
def create_admin_menu_item(
    payload: MenuItemPayload,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> MenuItemResponse:
    """Create a menu item."""
    return serialize_menu_item(create_menu_item(db, **payload.model_dump()))


@router.put("/menu/{item_id}", response_model=MenuItemResponse)
def update_admin_menu_item(
    item_id: int,
    payload: MenuItemPayload,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> MenuItemResponse:
    """Replace a menu item's fields."""
    item = _get_item_or_404(db, item_id)
    return serialize_menu_item(update_menu_item(db, item, payload.model_dump()))


@router.delete("/menu/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_admin_menu_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> Response:
    """Delete a menu item and its orders."""
    delete_menu_item(db, _get_item_or_404(db, item_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/orders", response_model=list[AdminDayResponse])
def get_all_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> list[AdminDayResponse]:
    """Return every order grouped by serve date with per-day totals."""
    now: datetime = time_utils.utc_now()
    days: list[AdminDayResponse] = []
    for group in group_by_serve_date(list_all_orders(db)):
        days.append(
            AdminDayResponse(
                date_key=group.date_key,
                serve_date=group.serve_date,
                order_count=len(group.items),
                totals=serialize_totals(calculate_aggregate_totals(order_lines(group.items))),
                orders=[serialize_admin_order(order, now) for order in group.items],
            )
        )
    return days


@router.get("/serve-dates", response_model=list[date])
def get_serve_dates(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> list[date]:
    """Return serve dates that have active menu items."""
    return list_serve_dates(db)


def _serialize_shift_report(report: ShiftReport, now: datetime) -> ShiftReportResponse:
    sections: list[ShiftSectionResponse] = []
    for section in report.sections:
        users = [
            ShiftUserResponse(
                user_id=group.user_id,
                name=group.profile.full_name if group.profile is not None else f"User #{group.user_id}",
                orders=[serialize_admin_order(order, now) for order in group.orders],
                totals=serialize_totals(user_totals(group)),
            )
            for group in section.users
        ]
        sections.append(
            ShiftSectionResponse(
                shift=section.shift,
                label=section.label,
                users=users,
                item_summary=section.item_summary,
                totals=serialize_totals(section.totals),
            )
        )
    return ShiftReportResponse(serve_date=report.serve_date, sections=sections, totals=serialize_totals(report.totals))


@router.get("/orders-by-shift", response_model=ShiftReportResponse)
def get_orders_by_shift(
    serve_date: date = Query(alias="date"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> ShiftReportResponse:
    """Kitchen report for one serve date grouped by shift and user."""
    now: datetime = time_utils.utc_now()
    report = build_shift_report(list_orders_for_serve_date(db, serve_date), serve_date)
    return _serialize_shift_report(report, now)


@router.get("/orders-by-shift/pdf")
def get_orders_by_shift_pdf(
    serve_date: date = Query(alias="date"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> Response:
    """Printable version of the shift report."""
    report = build_shift_report(list_orders_for_serve_date(db, serve_date), serve_date)
    generated_at = time_utils.utc_now().astimezone(time_utils.local_zone())
    pdf_bytes = render_shift_report_pdf(report, {"generated_at": generated_at.strftime("%Y-%m-%d %H:%M")})
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{report_filename(report)}"'},
    )


@router.get("/profiles", response_model=ProfileDirectoryResponse)
def get_profiles(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> ProfileDirectoryResponse:
    """List profiles grouped by shift, with admins listed separately."""
    directory = group_profiles_by_shift(list_profiles(db))
    return ProfileDirectoryResponse(
        by_shift={
            shift: [ProfileResponse.model_validate(profile) for profile in members]
            for shift, members in directory.by_shift.items()
        },
        admins=[ProfileResponse.model_validate(profile) for profile in directory.admins],
    )


@router.put("/profiles/{user_id}", response_model=ProfileResponse)
def update_profile_as_admin(
    user_id: int,
    payload: AdminProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> ProfileResponse:
    """Update any user's profile; fields missing from the body are left unchanged."""
    profile: Profile | None = get_profile(db, user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    updates = payload.model_dump(exclude_unset=True)
    if user_id == current_user.id and updates.get("is_admin") is False:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Admins cannot remove their own admin role")
    return ProfileResponse.model_validate(update_user_profile(db, profile, updates))
