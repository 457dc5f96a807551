#!/usr/bin/env python3
"""Seed a development database with sample employers, talents and jobs.

Usage:
    python -m scripts.seed

Environment variables:
    DATABASE_URL: SQLAlchemy database URL (defaults to sqlite:///talentx.db)
"""
import logging
import sys

from sqlalchemy.orm import Session

from talentx.engagement import ApplicationService
from talentx.logging_config import setup_logging
from talentx.persistence.database import get_session, init_db
from talentx.persistence.models import Job, TalentProfile, User

logger = logging.getLogger(__name__)

EMPLOYERS = [
    ("employer1@techcorp.com", "John Smith", "TechCorp Solutions"),
    ("employer2@innovateco.com", "Sarah Johnson", "InnovateCo"),
    ("employer3@datapro.com", "Michael Chen", "DataPro Systems"),
]

TALENTS = [
    ("talent1@dev.com", "Alice Wilson", ["JavaScript", "React", "Node.js", "TypeScript"], 5,
     "Full-stack developer with expertise in modern web technologies"),
    ("talent2@dev.com", "Bob Martinez", ["Python", "Machine Learning", "TensorFlow", "Data Science"], 3,
     "Data scientist passionate about AI and machine learning"),
    ("talent3@dev.com", "Carol Davis", ["Java", "Spring Boot", "Microservices", "Docker"], 7,
     "Senior backend developer specializing in enterprise applications"),
    ("talent4@dev.com", "David Kim", ["React", "Vue.js", "CSS", "UI/UX"], 4,
     "Frontend developer with strong design skills"),
    ("talent5@dev.com", "Emma Brown", ["Python", "Django", "PostgreSQL", "AWS"], 6,
     "Backend developer with cloud expertise"),
]

# (employer index, title, required skills)
JOBS = [
    (0, "Senior Frontend Developer", ["React", "TypeScript", "Node.js", "CSS"]),
    (0, "Full Stack Engineer", ["JavaScript", "React", "Python", "PostgreSQL"]),
    (1, "Data Scientist", ["Python", "Machine Learning", "TensorFlow", "Pandas"]),
    (1, "Machine Learning Engineer", ["Python", "PyTorch", "AWS", "Docker"]),
    (2, "Backend Developer", ["Java", "Spring Boot", "Microservices", "MySQL"]),
    (2, "DevOps Engineer", ["Docker", "Kubernetes", "AWS", "CI/CD"]),
]

# (job index, talent index)
APPLICATIONS = [(0, 0), (1, 0), (2, 1), (3, 1), (4, 2), (0, 3), (5, 4)]


def seed(session: Session) -> dict[str, int]:
    """Insert the sample data and return how many rows of each kind were created."""
    employers = []
    for email, name, company in EMPLOYERS:
        employer = User(email=email, name=name, role="employer", company_name=company)
        session.add(employer)
        employers.append(employer)

    talents = []
    for email, name, skills, years, bio in TALENTS:
        talent = User(email=email, name=name, role="talent")
        talent.profile = TalentProfile(skills=skills, experience_years=years, bio=bio)
        session.add(talent)
        talents.append(talent)
    session.flush()

    jobs = []
    for employer_index, title, skills in JOBS:
        job = Job(
            employer_id=employers[employer_index].id,
            title=title,
            required_skills=skills,
            description=f"We are looking for a talented {title} to join our team.",
        )
        session.add(job)
        jobs.append(job)
    session.commit()

    job_ids = [job.id for job in jobs]
    talent_ids = [talent.id for talent in talents]
    service = ApplicationService(session)
    for job_index, talent_index in APPLICATIONS:
        service.create_application(talent_ids[talent_index], job_ids[job_index])

    counts = {
        "employers": len(employers),
        "talents": len(talents),
        "jobs": len(jobs),
        "applications": len(APPLICATIONS),
    }
    logger.info("Seeded %s", counts)
    return counts


def main() -> None:
    setup_logging()
    init_db()
    with get_session() as session:
        seed(session)


if __name__ == "__main__":
    try:
        main()
    except Exception as e:
        logger.error("Seeding failed: %s", e)
        sys.exit(1)
