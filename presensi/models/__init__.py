"""ORM models — importing this package registers every table on ``Base.metadata``."""

from presensi.models.attendance import Attendance, Overtime
from presensi.models.employee import Employee
from presensi.models.holiday import Holiday
from presensi.models.organisation import Department, Position
from presensi.models.password_reset import PasswordResetToken
from presensi.models.user import User

__all__ = [
    "Attendance",
    "Department",
    "Employee",
    "Holiday",
    "Overtime",
    "PasswordResetToken",
    "Position",
    "User",
]
