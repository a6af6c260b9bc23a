from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Literal, Union
from datetime import datetime, timezone
import enum


class UserRole(str, enum.Enum):
    STUDENT = "STUDENT"
    ADMIN = "ADMIN"
    TEAM = "TEAM"


class Grade(str, enum.Enum):
    """Cohort tag used to filter which courses a student sees."""
    FIRST_SECONDARY = "1SEC"
    SECOND_SECONDARY = "2SEC"
    THIRD_SECONDARY = "3SEC"


GRADE_LABELS: Dict[Grade, str] = {
    Grade.FIRST_SECONDARY: "First Secondary",
    Grade.SECOND_SECONDARY: "Second Secondary",
    Grade.THIRD_SECONDARY: "Third Secondary",
}


class StudentLevel(str, enum.Enum):
    EXCELLENT = "EXCELLENT"
    AVERAGE = "AVERAGE"
    WEAK = "WEAK"


class LectureType(str, enum.Enum):
    VIDEO = "VIDEO"
    FILE = "FILE"
    IMAGE = "IMAGE"
    AUDIO = "AUDIO"


class ContentKind(str, enum.Enum):
    REMOTE_URL = "REMOTE_URL"
    LOCAL_BINARY_HANDLE = "LOCAL_BINARY_HANDLE"


class CertificateType(str, enum.Enum):
    EXCELLENCE = "EXCELLENCE"
    PROGRESS = "PROGRESS"
    COMPLETION = "COMPLETION"


AnswerOption = Literal["A", "B", "C", "D"]


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps are taken to be UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _unique(ids: List[str]) -> List[str]:
    return list(dict.fromkeys(ids))


# =============================================================================
# Persisted records
# =============================================================================

class ContentRef(BaseModel):
    """Where a lecture or question body lives. Only ever stored and compared."""
    kind: ContentKind = ContentKind.REMOTE_URL
    value: str


class Certificate(BaseModel):
    id: str
    title: str
    content: str
    date: str
    type: CertificateType


class User(BaseModel):
    id: str
    full_name: str
    email: str
    password: Optional[str] = None
    phone: str = ""
    parent_phone: str = ""
    student_code: str = ""
    governorate: str = ""
    grade: Grade
    role: UserRole = UserRole.STUDENT
    level: StudentLevel = StudentLevel.AVERAGE
    is_blocked: bool = False
    login_count: int = 0
    completed_lectures: List[str] = []
    unlocked_courses: List[str] = []
    certificates: List[Certificate] = []
    created_at: Optional[datetime] = None

    @field_validator("completed_lectures", "unlocked_courses")
    @classmethod
    def dedupe(cls, v: List[str]) -> List[str]:
        return _unique(v)


class Lecture(BaseModel):
    id: str
    title: str
    type: LectureType
    content: ContentRef
    file_name: Optional[str] = None
    duration: Optional[int] = None


class Assignment(BaseModel):
    id: str
    title: str
    description: str = ""
    file_url: Optional[str] = None
    deadline: datetime
    duration_minutes: int = 0

    @field_validator("deadline")
    @classmethod
    def deadline_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class ExamQuestion(BaseModel):
    id: str
    content: ContentRef
    correct_answer: AnswerOption


class Exam(BaseModel):
    id: str
    title: str = ""
    duration_minutes: Optional[int] = None  # 0 / absent -> default duration
    questions: List[ExamQuestion] = []


class Course(BaseModel):
    id: str
    title: str
    description: str = ""
    thumbnail: str = ""
    grade: Grade
    is_paid: bool = False
    price: Optional[float] = None
    lectures: List[Lecture] = []
    assignments: List[Assignment] = []
    exams: List[Exam] = []
    expiry_date: Optional[datetime] = None

    @field_validator("expiry_date")
    @classmethod
    def expiry_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)


class ActivationCode(BaseModel):
    code: str
    course_id: str
    course_title: str = ""
    is_used: bool = False
    used_by: Optional[str] = None
    created_at: Optional[datetime] = None


class PlatformConfig(BaseModel):
    teacher_name: str = ""
    teacher_bio: str = ""
    payment_number: str = ""
    announcement_text: str = ""
    announcement_target: Union[Grade, Literal["ALL"]] = "ALL"
    is_announcement_active: bool = False
    is_forum_locked: Dict[Grade, bool] = {g: False for g in Grade}
    term_plans: Dict[Grade, str] = {g: "" for g in Grade}


# =============================================================================
# Request / response schemas (routes)
# =============================================================================

class SignupRequest(BaseModel):
    full_name: str
    email: str
    password: str
    phone: str = ""
    parent_phone: str = ""
    student_code: Optional[str] = None
    governorate: str = ""
    grade: Grade


class LoginRequest(BaseModel):
    email: str
    password: str


class BlockRequest(BaseModel):
    blocked: bool


class LevelRequest(BaseModel):
    level: StudentLevel


class CertificateRequest(BaseModel):
    type: CertificateType = CertificateType.EXCELLENCE


class CourseCreate(BaseModel):
    """Admin payload for creating or replacing a course."""
    title: str
    description: str = ""
    thumbnail: str = ""
    grade: Grade
    is_paid: bool = False
    price: Optional[float] = None
    lectures: List[Lecture] = []
    assignments: List[Assignment] = []
    exams: List[Exam] = []
    expiry_date: Optional[datetime] = None


class DescribeRequest(BaseModel):
    title: str


class DescribeResponse(BaseModel):
    description: str


class ActivateRequest(BaseModel):
    code: str


class ActivateResponse(BaseModel):
    success: bool
    course_id: str


class CourseProgress(BaseModel):
    course_id: str
    title: str
    completed: int
    total: int
    percentage: int


class ProgressResponse(BaseModel):
    overall: int
    courses: List[CourseProgress]


class StatsResponse(BaseModel):
    total_students: int
    total_courses: int
    level_counts: Dict[StudentLevel, int]


class AnswerRequest(BaseModel):
    question_id: str
    answer: AnswerOption


class NavigateRequest(BaseModel):
    direction: Literal[-1, 1]


class SubmitRequest(BaseModel):
    """The yes/no confirmation gate in front of a manual submit."""
    confirm: bool = False


class ExamResult(BaseModel):
    score: int
    total: int


class ExamSessionView(BaseModel):
    exam_id: str
    status: str
    current_index: int
    total_questions: int
    remaining_seconds: int
    answers: Dict[str, AnswerOption]
    result: Optional[ExamResult] = None


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str
    history: List[ChatTurn] = Field(default_factory=list)


class ChatResponse(BaseModel):
    reply: str


class PlatformConfigView(BaseModel):
    """Platform config as one user sees it."""
    teacher_name: str
    teacher_bio: str = ""
    payment_number: str = ""
    announcement: Optional[str] = None
    term_plan: str = ""
    is_forum_locked: bool = False
