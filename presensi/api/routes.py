"""
Route table — every endpoint of the API, wired to its handler.

The table is assembled and frozen at import, then served through a
single catch-all FastAPI route that hands each request to the
``RequestRouter``.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from presensi.api.deps import BearerTokenValidator, get_db
from presensi.api.handlers import (attendance, auth, departments, employees,
                                   password, positions, schedule, users)
from presensi.routing import (HandlerRegistry, RequestRouter, delete, get,
                              group, patch, post)

ROUTES = group(
    # ── Authentication (public) ────────────────────────────────────
    post("/login", auth.login),
    post("/send-token", password.send_token),
    post("/check-token", password.check_token),
    post("/change-password", password.change_password),
    # ── Everything else needs a bearer token ───────────────────────
    group(
        # Users
        get("/user/{id}", users.show_user),
        get("/users", users.show_users),
        patch("/user/{id}", users.update_user),
        post("/register", auth.register),
        # Attendance
        group(
            get("/status", attendance.today_status),
            post("/in", attendance.clock_in),
            post("/out", attendance.clock_out),
            prefix="absen",
        ),
        post("/lembur/in", attendance.overtime_in),
        post("/lembur/out", attendance.overtime_out),
        # Schedule
        group(
            get("/year/{year?}", schedule.year_schedule),
            post("/holiday", schedule.add_holiday),
            prefix="schedule",
        ),
        # Employees
        get("employees", employees.list_employees),
        get("employees/{id}", employees.get_employee),
        patch("employee/profile/{id}", employees.update_profile),
        patch("employee/management/{id}", employees.update_management),
        # Departments
        get("departments", departments.list_departments),
        get("departments/{id}", departments.get_department),
        get("departements", departments.list_departments),  # legacy spelling
        post("departments", departments.create_department),
        patch("departments/{id}", departments.update_department),
        delete("departments/{id}", departments.delete_department),
        # Positions
        get("positions", positions.list_positions),
        get("positions/{id}", positions.get_position),
        get("position/{userId}", positions.position_of_user),
        post("positions", positions.create_position),
        patch("positions/{id}", positions.update_position),
        delete("positions/{id}", positions.delete_position),
        protected=True,
    ),
)

registry = HandlerRegistry.build(ROUTES)
request_router = RequestRouter(registry, BearerTokenValidator())

# Every method reaches the router so undeclared ones get its 404, not a 405
DISPATCH_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

api_router = APIRouter()


@api_router.api_route(
    "/{path:path}",
    methods=DISPATCH_METHODS,
    include_in_schema=False,
)
async def dispatch(
    path: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    return await request_router.dispatch(request, path, db)
