from dataclasses import dataclass, field
from typing import Dict, List, Optional

from validators import SEMESTERS

DEFAULT_PHOTO_URL = "please add your photo"


def empty_marks() -> Dict[str, List[int]]:
    return {semester: [] for semester in SEMESTERS}


@dataclass
class Student:
    reg_no: str
    dob: str
    department: str
    name: str
    photo_url: str = DEFAULT_PHOTO_URL
    marks: Dict[str, List[int]] = field(default_factory=empty_marks)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict:
        """Full record, keyed the way API clients expect."""
        return {
            'regNo': self.reg_no,
            'dob': self.dob,
            'department': self.department,
            'name': self.name,
            'photoUrl': self.photo_url,
            'marks': {semester: list(self.marks.get(semester, []))
                      for semester in SEMESTERS},
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    def login_view(self) -> Dict:
        return {
            'regNo': self.reg_no,
            'name': self.name,
            'department': self.department,
            'marks': self.to_dict()['marks'],
        }

    def summary_view(self) -> Dict:
        return {
            'regNo': self.reg_no,
            'name': self.name,
            'department': self.department,
            'photoUrl': self.photo_url,
        }

    def marks_view(self) -> Dict:
        return {
            'regNo': self.reg_no,
            'name': self.name,
            'marks': self.to_dict()['marks'],
        }


@dataclass
class Admin:
    admin_id: str
    password_hash: str
    name: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict:
        # password_hash stays server side
        return {'adminId': self.admin_id, 'name': self.name}
