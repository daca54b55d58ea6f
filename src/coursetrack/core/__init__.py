"""Core business rules.

Modules:
- course_definition: static day -> sections table
- progress_engine: section, slide and quiz events
- completion_engine: day completion gate and day badge
- certificate_engine: course certificate eligibility and issuance
- badges: badge catalogue and awarding
- profile_service: profile reads and one-time completion
"""

__all__ = [
    "course_definition",
    "progress_engine",
    "completion_engine",
    "certificate_engine",
    "badges",
    "profile_service",
]
