"""
Seed script to populate the database with demo students for testing the swipe feed.
Run this script with: python seed_students.py
"""
from app import create_app
from models import db, User, DatingProfile, Wallet
import logging

logger = logging.getLogger(__name__)

# Demo students across South African campuses
SEED_STUDENTS = [
    {
        "id": "seed_student_001",
        "full_name": "Thandi Nkosi",
        "email": "thandi.nkosi@student.test",
        "institution_name": "University of Cape Town",
        "course_program": "BSc Computer Science",
        "balance_cents": 50000,
        "dating": {
            "display_name": "Thandi",
            "age": 21,
            "bio": "Second year CS. Hiking Lion's Head at sunrise and arguing about the best bunny chow.",
            "interests": ["Hiking", "Coding", "Jazz"],
            "looking_for": "friendship",
        }
    },
    {
        "id": "seed_student_002",
        "full_name": "Sipho Dlamini",
        "email": "sipho.dlamini@student.test",
        "institution_name": "University of the Witwatersrand",
        "course_program": "BCom Accounting",
        "balance_cents": 125050,
        "dating": {
            "display_name": "Sipho",
            "age": 23,
            "bio": "Future CA(SA). Weekend braai master and amateur DJ.",
            "interests": ["Music", "Soccer", "Cooking"],
            "looking_for": "relationship",
        }
    },
    {
        "id": "seed_student_003",
        "full_name": "Aisha Patel",
        "email": "aisha.patel@student.test",
        "institution_name": "Stellenbosch University",
        "course_program": "LLB",
        "balance_cents": 30000,
        "dating": {
            "display_name": "Aisha",
            "age": 22,
            "bio": "Law student, debate society, bookshop regular.",
            "interests": ["Debating", "Reading", "Coffee"],
            "looking_for": "networking",
        }
    },
    {
        "id": "seed_student_004",
        "full_name": "Pieter van Wyk",
        "email": "pieter.vanwyk@student.test",
        "institution_name": "University of Pretoria",
        "course_program": "BEng Mechanical",
        "balance_cents": 0,
        "dating": {
            "display_name": "Pieter",
            "age": 24,
            "bio": "Engineering, rugby and building things that roll.",
            "interests": ["Rugby", "Robotics", "Cycling"],
            "looking_for": "casual",
        }
    },
]


def seed_database(students=None):
    """Create each demo student with a wallet and dating profile; existing ids are skipped"""
    students = SEED_STUDENTS if students is None else students

    logger.info("Starting database seeding...")

    created_count = 0
    skipped_count = 0
    error_count = 0

    for student in students:
        try:
            if db.session.get(User, student["id"]):
                logger.info(f"User {student['id']} already exists, skipping")
                skipped_count += 1
                continue

            user = User(
                id=student["id"],
                full_name=student["full_name"],
                email=student["email"],
                institution_name=student["institution_name"],
                course_program=student["course_program"]
            )
            db.session.add(user)
            db.session.flush()  # User row must exist before its children

            db.session.add(Wallet(user_id=user.id, balance_cents=student["balance_cents"]))

            dating = student["dating"]
            db.session.add(DatingProfile(
                user_id=user.id,
                display_name=dating["display_name"],
                age=dating["age"],
                bio=dating["bio"],
                interests=dating["interests"],
                institution=student["institution_name"],
                course=student["course_program"],
                looking_for=dating["looking_for"]
            ))

            db.session.commit()
            created_count += 1
            logger.info(f"Created student: {user.full_name} ({user.id})")

        except Exception as e:
            db.session.rollback()
            error_count += 1
            logger.error(f"Error creating student {student['full_name']}: {str(e)}")

    logger.info(f"Seeding complete: {created_count} created, {skipped_count} skipped, {error_count} errors")
    logger.info(f"Total users: {User.query.count()}, dating profiles: {DatingProfile.query.count()}")

    return {'created': created_count, 'skipped': skipped_count, 'errors': error_count}


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
        seed_database()
