# ============================================================================
# SCOPE: INFRASTRUCTURE LAYER (Appointment Booking)
# Description: Reference data for the simulated collaborators.
# ============================================================================
"""Seed data for the in-memory provider directory and identity service."""

from typing import Any

PROVIDERS: list[dict[str, Any]] = [
    {
        "id": "1",
        "name": "Dr. Nguyễn Thị Minh",
        "specialty": "Cardiology",
        "experience": "15 years",
        "avatarUrl": "https://randomuser.me/api/portraits/women/44.jpg",
        "availability": "Mon, Wed, Fri",
        "rating": 4.8,
        "department": "Cardiology",
    },
    {
        "id": "2",
        "name": "Dr. Trần Văn Đức",
        "specialty": "Cardiology",
        "experience": "18 years",
        "avatarUrl": "https://randomuser.me/api/portraits/men/32.jpg",
        "availability": "Tue, Wed, Thu",
        "rating": 4.7,
        "department": "Cardiology",
    },
    {
        "id": "3",
        "name": "Dr. Lê Hoàng Long",
        "specialty": "Neurology",
        "experience": "12 years",
        "avatarUrl": "https://randomuser.me/api/portraits/men/46.jpg",
        "availability": "Tue, Thu",
        "rating": 4.7,
        "department": "Neurology",
    },
    {
        "id": "4",
        "name": "Dr. Phạm Thu Hà",
        "specialty": "Pediatrics",
        "experience": "8 years",
        "avatarUrl": "https://randomuser.me/api/portraits/women/65.jpg",
        "availability": "Mon, Tue, Thu",
        "rating": 4.9,
        "department": "Pediatrics",
    },
    {
        "id": "5",
        "name": "Dr. Vũ Quang Minh",
        "specialty": "Pediatrics",
        "experience": "14 years",
        "avatarUrl": "https://randomuser.me/api/portraits/men/55.jpg",
        "availability": "Mon, Wed, Fri",
        "rating": 4.6,
        "department": "Pediatrics",
    },
    {
        "id": "6",
        "name": "Dr. Đặng Thị Lan",
        "specialty": "Orthopedics",
        "experience": "20 years",
        "avatarUrl": "https://randomuser.me/api/portraits/women/26.jpg",
        "availability": "Wed, Fri",
        "rating": 4.6,
        "department": "Orthopedics",
    },
    {
        "id": "7",
        "name": "Dr. Hoàng Minh Tuấn",
        "specialty": "Dermatology",
        "experience": "10 years",
        "avatarUrl": "https://randomuser.me/api/portraits/men/25.jpg",
        "availability": "Mon, Thu, Fri",
        "rating": 4.5,
        "department": "Dermatology",
    },
]

DEPARTMENTS: list[dict[str, Any]] = [
    {
        "id": "1",
        "name": "Cardiology",
        "description": "Heart and cardiovascular system specialists",
        "iconClass": "bi-heart-pulse",
    },
    {
        "id": "2",
        "name": "Neurology",
        "description": "Brain, spine and nervous system specialists",
        "iconClass": "bi-activity",
    },
    {
        "id": "3",
        "name": "Pediatrics",
        "description": "Child and adolescent health specialists",
        "iconClass": "bi-emoji-smile",
    },
    {
        "id": "4",
        "name": "Orthopedics",
        "description": "Bone, joint and muscle specialists",
        "iconClass": "bi-bandaid",
    },
    {
        "id": "5",
        "name": "Dermatology",
        "description": "Skin, hair and nail specialists",
        "iconClass": "bi-eye",
    },
]

# Bearer token -> identity profile
DEMO_USERS: dict[str, dict[str, Any]] = {
    "demo-patient-token": {
        "id": "p-1001",
        "role": "patient",
        "firstName": "Linh",
        "lastName": "Tran",
        "email": "linh.tran@example.com",
        "phone": "+84 90 123 4567",
        "dateOfBirth": "1990-04-12",
        "address": "12 Hai Ba Trung, Hanoi",
        "healthInsurance": "HI-4829-1103",
    },
    "demo-doctor-token": {
        "id": "d-2001",
        "role": "doctor",
        "name": "Dr. Nguyễn Thị Minh",
        "email": "minh.nguyen@example.com",
    },
}
