"""Course definition table.

Static description of the five-day course: for every day, the ordered list
of sections a learner must complete. Used read-only by the engines and
exposed to the UI through the course endpoints.

Section ids are stable identifiers stored in user progress records, so they
must never be renamed once learners have progress against them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

COURSE_ID = "ai-fundamentals-5day"
COURSE_TITLE = "AI Fundamentals for Designers - 5-Day Crash Course"
TOTAL_DAYS = 5

SectionType = Literal["content", "video", "activity", "quiz"]


@dataclass(frozen=True)
class CourseSection:
    """A trackable unit of content within a day."""

    id: str
    type: SectionType
    title: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"id": self.id, "type": self.type, "title": self.title}


@dataclass(frozen=True)
class CourseDay:
    """One day of the course with its ordered sections."""

    day_id: int
    title: str
    description: str
    estimated_time: str
    sections: tuple[CourseSection, ...]

    @property
    def section_ids(self) -> list[str]:
        """Ordered section ids for the day."""
        return [s.id for s in self.sections]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "day_id": self.day_id,
            "title": self.title,
            "description": self.description,
            "estimated_time": self.estimated_time,
            "sections": [s.to_dict() for s in self.sections],
        }


# =============================================================================
# COURSE TABLE
# =============================================================================

_COURSE_DAYS: tuple[CourseDay, ...] = (
    CourseDay(
        day_id=1,
        title="Introduction to AI & Design",
        description="Explore the fundamentals of AI and how it's transforming the design industry",
        estimated_time="30 min",
        sections=(
            CourseSection("day1-intro", "content", "What is Artificial Intelligence?"),
            CourseSection("day1-history", "content", "A Brief History of AI"),
            CourseSection("day1-video", "video", "Essential AI Concepts Explained"),
            CourseSection("day1-activity", "activity", "Explore AI Tools"),
            CourseSection("day1-quiz", "quiz", "Day 1 Knowledge Check"),
        ),
    ),
    CourseDay(
        day_id=2,
        title="Understanding AI Tools",
        description="Discover popular AI tools and platforms used by designers today",
        estimated_time="45 min",
        sections=(
            CourseSection("day2-intro", "content", "Types of AI and How They Work"),
            CourseSection("day2-generative", "content", "Generative AI Deep Dive"),
            CourseSection(
                "day2-video", "video", "Understanding Neural Networks & Machine Learning"
            ),
            CourseSection("day2-activity", "activity", "AI Image Generation Practice"),
            CourseSection("day2-quiz", "quiz", "Day 2 Knowledge Check"),
        ),
    ),
    CourseDay(
        day_id=3,
        title="Generative AI for Visual Design",
        description="Learn how to use AI for creating images, graphics, and visual content",
        estimated_time="60 min",
        sections=(
            CourseSection("day3-intro", "content", "AI Tools for Designers"),
            CourseSection("day3-workflows", "content", "AI-Enhanced Design Workflows"),
            CourseSection("day3-video", "video", "AI Tools for Creative Design"),
            CourseSection("day3-activity", "activity", "Build an AI-Enhanced Workflow"),
            CourseSection("day3-quiz", "quiz", "Day 3 Knowledge Check"),
        ),
    ),
    CourseDay(
        day_id=4,
        title="AI-Powered Design Workflows",
        description="Integrate AI into your design process for enhanced productivity",
        estimated_time="50 min",
        sections=(
            CourseSection("day4-intro", "content", "Ethical AI and Responsible Design"),
            CourseSection(
                "day4-guidelines", "content", "Responsible AI Guidelines for Designers"
            ),
            CourseSection("day4-video", "video", "AI Ethics and Responsible Design"),
            CourseSection("day4-activity", "activity", "Create Your AI Ethics Framework"),
            CourseSection("day4-quiz", "quiz", "Day 4 Knowledge Check"),
        ),
    ),
    CourseDay(
        day_id=5,
        title="Future of AI in Design",
        description="Explore emerging trends and prepare for the future of AI-assisted design",
        estimated_time="40 min",
        sections=(
            CourseSection("day5-intro", "content", "The Future of AI in Design"),
            CourseSection("day5-career", "content", "Building an AI-Enhanced Career"),
            CourseSection("day5-video", "video", "The Future of AI and Design"),
            CourseSection("day5-activity", "activity", "Design Your AI Learning Plan"),
            CourseSection("day5-final-quiz", "quiz", "Final Course Assessment"),
        ),
    ),
)

_DAYS_BY_ID: dict[int, CourseDay] = {day.day_id: day for day in _COURSE_DAYS}


# =============================================================================
# LOOKUPS
# =============================================================================


def list_course_days() -> list[CourseDay]:
    """All course days ordered by day number."""
    return list(_COURSE_DAYS)


def get_course_day(day_id: int) -> CourseDay | None:
    """Get a course day by number, or None if outside the course."""
    return _DAYS_BY_ID.get(day_id)


def valid_day_ids() -> list[int]:
    """Day numbers defined by the course."""
    return sorted(_DAYS_BY_ID)


def is_valid_day(day_id: int) -> bool:
    """Check whether a day number is part of the course."""
    return day_id in _DAYS_BY_ID


def get_section_ids(day_id: int) -> list[str]:
    """Ordered required section ids for a day (empty for unknown days)."""
    day = _DAYS_BY_ID.get(day_id)
    return day.section_ids if day else []


def is_valid_section(day_id: int, section_id: str) -> bool:
    """Check whether a section id belongs to the given day."""
    return section_id in get_section_ids(day_id)


def missing_sections(day_id: int, completed: list[str] | set[str]) -> list[str]:
    """Required sections of a day not present in ``completed``, in course order."""
    done = set(completed)
    return [sid for sid in get_section_ids(day_id) if sid not in done]
