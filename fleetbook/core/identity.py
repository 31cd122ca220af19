"""Identity resolution: who is this booking or principal, by name and role."""

from typing import Any, Dict, Iterable, Mapping, Optional

from fleetbook.models.employee import Employee, Role

UNKNOWN_USER = "Unknown User"


def index_by_email(employees: Iterable[Employee]) -> Dict[str, Employee]:
    """Map lower-cased email to employee. The first profile per email wins."""
    index = {}
    for employee in employees:
        if employee.email:
            index.setdefault(employee.email.lower(), employee)
    return index


def index_by_id(employees: Iterable[Employee]) -> Dict[str, Employee]:
    return {employee.id: employee for employee in employees if employee.id}


def resolve_display_name(name: Optional[str] = None,
                         user_id: Optional[str] = None,
                         email: Optional[str] = None,
                         employees_by_id: Mapping[str, Employee] = None,
                         employees_by_email: Mapping[str, Employee] = None,
                         fallback: str = UNKNOWN_USER) -> str:
    """
    Resolve the name to display for a person.

    Precedence: the explicit name on the record, then the employee found by
    id, then the employee found by email, then ``fallback``.
    """
    if name and name.strip():
        return name.strip()

    if user_id and employees_by_id:
        employee = employees_by_id.get(user_id)
        if employee and employee.name:
            return employee.name

    if email and employees_by_email:
        employee = employees_by_email.get(email.lower())
        if employee and employee.name:
            return employee.name

    return fallback


def booking_display_name(record: Mapping[str, Any],
                         employees_by_id: Mapping[str, Employee] = None,
                         employees_by_email: Mapping[str, Employee] = None) -> str:
    """Display name for the requester of a booking record."""
    return resolve_display_name(
        name=record.get("userName"),
        user_id=record.get("userId"),
        email=record.get("userEmail"),
        employees_by_id=employees_by_id,
        employees_by_email=employees_by_email,
    )


def resolve_profile(email: str, employees: Iterable[Employee]) -> Employee:
    """
    Find the employee profile for an authenticated account email.

    Accounts without a profile get a plain employee profile named
    "Unknown User", so they can still book but never administer.
    """
    profile = index_by_email(employees).get((email or "").lower())
    if profile is not None:
        return profile
    return Employee(name=UNKNOWN_USER, email=(email or "").lower(), role=Role.EMPLOYEE)
