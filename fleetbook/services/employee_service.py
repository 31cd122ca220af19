"""Employee profile service for the FleetBook application."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fleetbook.core.errors import ValidationError
from fleetbook.models.employee import Employee, Role
from fleetbook.services.auth_service import AuthService
from fleetbook.services.store import DocumentStore

EDITABLE_FIELDS = ("name", "email", "role", "department")


class EmployeeService:
    """Service for managing employee profiles (admin only)."""

    @staticmethod
    def list_employees(token: str) -> List[Dict[str, Any]]:
        """List employee profiles sorted by name."""
        AuthService.require_role(token, [Role.ADMIN.value])
        employees = DocumentStore.list("employees")
        employees.sort(key=lambda e: (e.get("name") or "").lower())
        return employees

    @staticmethod
    def find_by_email(email: str) -> Optional[Employee]:
        records = DocumentStore.query("employees", email=(email or "").strip().lower())
        return Employee.from_record(records[0]) if records else None

    @staticmethod
    def add_employee(token: str, name: str, email: str, role: str = Role.EMPLOYEE.value,
                     department: Optional[str] = None) -> Dict[str, Any]:
        """
        Add an employee profile.

        The profile is matched to a sign-in account by email; it does not
        create the account itself.

        Raises:
            ValidationError: If a field is invalid or the email is taken
        """
        AuthService.require_role(token, [Role.ADMIN.value])
        if not name or not name.strip():
            raise ValidationError("Employee name is required.")
        if not email or "@" not in email:
            raise ValidationError("A valid employee email is required.")
        EmployeeService._validate_role(role)

        email = email.strip().lower()
        if EmployeeService.find_by_email(email):
            raise ValidationError(f"An employee with email {email} already exists.")

        return DocumentStore.create("employees", {
            "name": name.strip(),
            "email": email,
            "role": role,
            "department": department,
            "createdAt": datetime.now().isoformat(),
        })

    @staticmethod
    def update_employee(token: str, employee_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        AuthService.require_role(token, [Role.ADMIN.value])
        fields = {k: v for k, v in update_data.items() if k in EDITABLE_FIELDS and v is not None}
        if not fields:
            raise ValidationError("No employee fields to update.")
        if "role" in fields:
            EmployeeService._validate_role(fields["role"])
        if "email" in fields:
            fields["email"] = fields["email"].strip().lower()
        return DocumentStore.update("employees", employee_id, fields)

    @staticmethod
    def delete_employee(token: str, employee_id: str) -> None:
        """Delete a profile. The matching sign-in account is left alone."""
        AuthService.require_role(token, [Role.ADMIN.value])
        DocumentStore.delete("employees", employee_id)

    @staticmethod
    def _validate_role(role: str) -> None:
        valid = [r.value for r in Role]
        if role not in valid:
            raise ValidationError(f"Invalid role. Choose from: {', '.join(valid)}")
