"""
Domain types for the Carespace API.

Plain dataclasses with explicit from_dict/to_dict. Field names are
snake_case here and camelCase on the wire. Only the fields the wrappers
read or send are modelled.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class User:
    """A Carespace platform user (clinician, admin, client account)."""
    id: str = ""
    email: str = ""
    name: str = ""
    first_name: str = ""
    last_name: str = ""
    role: str = ""
    is_active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict) -> "User":
        return cls(
            id=str(d.get("id", "")),
            email=d.get("email", ""),
            name=d.get("name", ""),
            first_name=d.get("firstName", ""),
            last_name=d.get("lastName", ""),
            role=d.get("role", ""),
            is_active=d.get("isActive", True),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self) -> dict:
        return _drop_empty({
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role,
            "isActive": self.is_active,
        })


@dataclass
class Address:
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "Address":
        return cls(
            street=d.get("street", ""),
            city=d.get("city", ""),
            state=d.get("state", ""),
            zip_code=d.get("zipCode", ""),
            country=d.get("country", ""),
        )

    def to_dict(self) -> dict:
        return _drop_empty({
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "country": self.country,
        })


@dataclass
class Client:
    """A patient receiving rehabilitation programs."""
    id: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    date_of_birth: Optional[str] = None  # YYYY-MM-DD
    gender: str = ""
    address: Address = field(default_factory=Address)
    medical_history: str = ""
    notes: str = ""
    is_active: bool = True

    @classmethod
    def from_dict(cls, d: dict) -> "Client":
        name = d.get("name") or " ".join(
            part for part in (d.get("firstName", ""), d.get("lastName", "")) if part
        )
        return cls(
            id=str(d.get("id", "")),
            name=name,
            email=d.get("email", ""),
            phone=d.get("phone", ""),
            date_of_birth=d.get("dateOfBirth"),
            gender=d.get("gender", ""),
            address=Address.from_dict(d.get("address") or {}),
            medical_history=d.get("medicalHistory", ""),
            notes=d.get("notes", ""),
            is_active=d.get("isActive", True),
        )

    def to_dict(self) -> dict:
        return _drop_empty({
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "dateOfBirth": self.date_of_birth,
            "gender": self.gender,
            "address": self.address.to_dict(),
            "medicalHistory": self.medical_history,
            "notes": self.notes,
            "isActive": self.is_active,
        })


@dataclass
class Exercise:
    """A single exercise block inside a program.

    duration and rest_time are in seconds.
    """
    id: str = ""
    name: str = ""
    description: str = ""
    instructions: str = ""
    video_url: str = ""
    image_url: str = ""
    duration: int = 0
    repetitions: int = 0
    sets: int = 0
    rest_time: int = 0
    order: int = 0

    @classmethod
    def from_dict(cls, d: dict) -> "Exercise":
        return cls(
            id=str(d.get("id", "")),
            name=d.get("name", ""),
            description=d.get("description", ""),
            instructions=d.get("instructions", ""),
            video_url=d.get("videoUrl", ""),
            image_url=d.get("imageUrl", ""),
            duration=d.get("duration", 0),
            repetitions=d.get("repetitions", 0),
            sets=d.get("sets", 0),
            rest_time=d.get("restTime", 0),
            order=d.get("order", 0),
        )

    def to_dict(self) -> dict:
        return _drop_empty({
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "instructions": self.instructions,
            "videoUrl": self.video_url,
            "imageUrl": self.image_url,
            "duration": self.duration,
            "repetitions": self.repetitions,
            "sets": self.sets,
            "restTime": self.rest_time,
            "order": self.order,
        })


@dataclass
class Program:
    """A rehabilitation program: an ordered list of exercises."""
    id: str = ""
    name: str = ""
    description: str = ""
    category: str = ""
    difficulty: str = ""
    duration: int = 0
    is_template: bool = False
    is_active: bool = True
    created_by: str = ""
    exercises: List[Exercise] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict) -> "Program":
        return cls(
            id=str(d.get("id", "")),
            name=d.get("name", ""),
            description=d.get("description", ""),
            category=d.get("category", ""),
            difficulty=d.get("difficulty") or d.get("difficultyLevel", ""),
            duration=d.get("duration", 0),
            is_template=d.get("isTemplate", False),
            is_active=d.get("isActive", True),
            created_by=d.get("createdBy", ""),
            exercises=[
                Exercise.from_dict(e) for e in d.get("exercises") or []
                if isinstance(e, dict)
            ],
        )

    def to_dict(self) -> dict:
        result = _drop_empty({
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "difficulty": self.difficulty,
            "duration": self.duration,
            "isTemplate": self.is_template,
            "isActive": self.is_active,
        })
        if self.exercises:
            result["exercises"] = [e.to_dict() for e in self.exercises]
        return result


@dataclass
class LoginRequest:
    email: str
    password: str

    def to_dict(self) -> dict:
        return {"email": self.email, "password": self.password}


@dataclass
class CreateUserRequest:
    email: str
    name: str = ""
    first_name: str = ""
    last_name: str = ""
    role: str = "client"
    password: str = ""

    def to_dict(self) -> dict:
        return _drop_empty({
            "email": self.email,
            "name": self.name,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role,
            "password": self.password,
        })


@dataclass
class LoginResponse:
    """Tokens returned by login and refresh."""
    access_token: str
    refresh_token: str = ""
    user: Optional[User] = None

    @classmethod
    def from_dict(cls, d: dict) -> "LoginResponse":
        user = d.get("user")
        return cls(
            access_token=d.get("accessToken") or d.get("access_token", ""),
            refresh_token=d.get("refreshToken") or d.get("refresh_token", ""),
            user=User.from_dict(user) if isinstance(user, dict) else None,
        )

    def to_dict(self) -> dict:
        result = {
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
        }
        if self.user:
            result["user"] = self.user.to_dict()
        return result


def _drop_empty(d: dict) -> dict:
    """Remove keys whose value is None, "" or an empty dict."""
    return {k: v for k, v in d.items() if v is not None and v != "" and v != {}}
