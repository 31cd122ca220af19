"""Employee entity for the FleetBook application."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Role(Enum):
    """Roles an employee profile can carry."""
    ADMIN = "admin"
    EMPLOYEE = "employee"
    # Stored by some records but grants nothing beyond EMPLOYEE
    MANAGER = "manager"


@dataclass
class Employee:
    """
    Represents an employee profile.

    Attributes:
        id: Unique identifier for the profile (None for unknown users)
        name: Employee's display name
        email: Employee's account email
        role: Employee's role
        department: Optional department name
        created_at: ISO timestamp of when the profile was created
    """
    name: str
    email: str
    role: Role = Role.EMPLOYEE
    id: Optional[str] = None
    department: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Employee":
        """Build an Employee from a store record. Unknown roles fall back to employee."""
        try:
            role = Role((record.get("role") or Role.EMPLOYEE.value).lower())
        except ValueError:
            role = Role.EMPLOYEE
        return cls(
            id=str(record["id"]) if record.get("id") else None,
            name=record.get("name") or "",
            email=(record.get("email") or "").lower(),
            role=role,
            department=record.get("department") or None,
            created_at=record.get("createdAt"),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "department": self.department,
            "createdAt": self.created_at,
        }
